"""Pydantic models for the model/attribute catalog built from a schema file."""

from pydantic import BaseModel


class CatalogModel(BaseModel):
    """A model record. ``id`` is the opaque schema token, ``name`` the derived display name."""

    id: str
    name: str


class CatalogAttribute(BaseModel):
    """An attribute record belonging to exactly one model.

    Attributes:
        id:           Opaque attribute token from the schema file.
        model_id:     Identifier of the owning CatalogModel.
        name:         Display name, the last segment of ``original_key``.
        original_key: The dotted path the name was derived from.
    """

    id: str
    model_id: str
    name: str
    original_key: str


class ModelWithAttributes(BaseModel):
    """Catalog read result entry: a model name and its sorted attribute names."""

    name: str
    attributes: list[str]


class IngestResult(BaseModel):
    """Counts of catalog rows stored by one ingestion pass."""

    models: int = 0
    attributes: int = 0
