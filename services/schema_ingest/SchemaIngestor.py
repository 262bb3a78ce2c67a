"""Schema ingestion.

Reads a schema definition document of the form::

    <model id>:
      <attribute id>: Atomiton.DBA.ShapeFile.enterpriseId
      <attribute id>: $ncm

and derives the catalog from the dotted paths: the second-to-last segment names
the model, the last segment names the attribute. "$ncm" marks an attribute
without a concrete mapping; it is skipped.
"""

from typing import Any

import yaml

from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.catalog import CatalogAttribute, CatalogModel, IngestResult, ModelWithAttributes

NO_MAPPING_SENTINEL = "$ncm"
PATH_SEPARATOR = "."

SchemaDocument = dict[str, dict[str, str]]


class SchemaDocumentError(ValueError):
    """Raised when schema text is not a mapping of models to attribute mappings."""


##########################################
############### PARSING ##################
##########################################

def parse_schema_text(text: str) -> SchemaDocument:
    """Load schema text into ``{model_id: {attribute_id: dotted_path}}``.

    Scalars are kept exactly as written (no YAML 1.1 typing), so "1.10" stays
    "1.10" and "yes" stays "yes". An empty entry is the empty string.

    Raises:
        SchemaDocumentError: If the text is not YAML or not shaped as a schema.
    """
    try:
        raw: Any = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise SchemaDocumentError(f"Failed to parse schema: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SchemaDocumentError(f"Schema must be a mapping of models, got {type(raw).__name__}.")

    schema: SchemaDocument = {}
    for model_id, attributes in raw.items():
        if attributes == "":
            attributes = {}
        if not isinstance(attributes, dict):
            raise SchemaDocumentError(f"Model '{model_id}' must map attribute ids to paths.")
        paths: dict[str, str] = {}
        for attribute_id, path in attributes.items():
            if not isinstance(path, str):
                raise SchemaDocumentError(f"Attribute '{attribute_id}' of model '{model_id}' is not a dotted path.")
            paths[attribute_id] = path
        schema[model_id] = paths
    return schema


##########################################
############### DERIVATION ###############
##########################################

def derive_model_name(attributes: dict[str, str]) -> str | None:
    """Name a model after the owning-type segment of its first usable path.

    Paths are tried in document order; sentinels and single-segment paths are
    passed over. The search stops at the first path with two or more segments.

    Returns:
        str | None: The second-to-last segment, or None if no path qualifies
            or that segment is empty.
    """
    for path in attributes.values():
        if path == NO_MAPPING_SENTINEL:
            continue
        segments = path.split(PATH_SEPARATOR)
        if len(segments) >= 2:
            return segments[-2] or None
    return None


def derive_attribute_name(path: str) -> str:
    """Return the last segment of a dotted path. An empty path yields an empty name."""
    return path.split(PATH_SEPARATOR)[-1]


def derive_catalog(schema: SchemaDocument) -> list[tuple[CatalogModel, list[CatalogAttribute]]]:
    """Derive catalog records without touching a store.

    Models without a resolvable name are left out together with their attributes.
    """
    catalog = []
    for model_id, attributes in schema.items():
        model_name = derive_model_name(attributes)
        if model_name is None:
            continue
        records = [
            CatalogAttribute(
                id=attribute_id,
                model_id=model_id,
                name=derive_attribute_name(path),
                original_key=path,
            )
            for attribute_id, path in attributes.items()
            if path != NO_MAPPING_SENTINEL
        ]
        catalog.append((CatalogModel(id=model_id, name=model_name), records))
    return catalog


##########################################
############### INGESTION ################
##########################################

class SchemaIngestor:
    """Writes a derived catalog into the store and reads it back."""

    def __init__(self, helper_config: HelperConfig, store_client: StoreClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._store_client = store_client

    def ingest(self, schema: SchemaDocument) -> IngestResult:
        """Upsert every derivable model and attribute.

        A failed upsert is logged and skipped. If a model fails, its attributes
        are skipped too. Rows from earlier schema versions are never removed.

        Args:
            schema (SchemaDocument): Parsed schema document.

        Returns:
            IngestResult: Number of models and attributes actually stored.
        """
        result = IngestResult()
        skipped_models = len(schema)
        for model, attributes in derive_catalog(schema):
            skipped_models -= 1
            try:
                self._store_client.do_upsert_model(model.id, model.name)
            except Exception as exc:
                self.logging.error("Error inserting model %s (%s): %s", model.name, model.id, exc)
                continue
            result.models += 1

            for attribute in attributes:
                try:
                    self._store_client.do_upsert_attribute(
                        attribute.id, attribute.model_id, attribute.name, attribute.original_key
                    )
                except Exception as exc:
                    self.logging.error("Error inserting attribute %s of model %s: %s", attribute.name, model.name, exc)
                    continue
                result.attributes += 1

        if skipped_models:
            self.logging.debug("%d model(s) without a resolvable name were skipped.", skipped_models)
        self.logging.info(
            "Schema ingested: %d model(s), %d attribute(s).", result.models, result.attributes
        )
        return result

    def ingest_text(self, text: str) -> IngestResult:
        """Parse schema text and ingest it.

        Raises:
            SchemaDocumentError: If the text is not a valid schema document.
        """
        return self.ingest(parse_schema_text(text))

    def list_catalog(self) -> list[ModelWithAttributes]:
        """Return the catalog sorted by model name, each attribute list sorted by name."""
        models = self._store_client.do_list_models_with_attributes()
        return sorted(
            (ModelWithAttributes(name=model.name, attributes=sorted(model.attributes)) for model in models),
            key=lambda model: model.name,
        )
