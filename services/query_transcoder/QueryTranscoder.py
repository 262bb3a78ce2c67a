"""Query transcoder.

Converts between the structured query the filter builder UI edits and the
query document that is shared and stored as text::

    StructuredQuery(function="avg", model="Person",
                    filters=[Filter(attribute="age", condition="gt", condition_value="30")])

    #
    avg:
      Person:
        age:
          gt: '30'

Decoding is lenient: a level that is not a mapping is skipped, so malformed
documents yield fewer filters instead of an error. Only text that is not YAML
at all, or whose top level is not a mapping, is rejected.

Keys are visited in document order. If a document holds several function keys
(or several model keys under the chosen function), the one written last wins and
only its filters are returned. A key written twice counts at its last position.
"""

from collections.abc import Hashable
from typing import Any, Union

import yaml

from shared.helper.yaml_text import YamlScalar, is_scalar, scalar_to_text
from shared.models.query import Filter, StructuredQuery

DOCUMENT_MARKER = "#"

# function -> model -> attribute -> condition -> value
DocumentNode = Union[YamlScalar, dict[Any, "DocumentNode"], list["DocumentNode"]]


class QueryDocumentError(ValueError):
    """Raised when query text cannot be read as a query document."""


class _LastKeyWinsLoader(yaml.SafeLoader):
    """Safe loader that moves a repeated key to the position of its last occurrence.

    The stock loader keeps the first position and overwrites the value, which
    would make "last in document order" pick the wrong key.
    """

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise yaml.constructor.ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    "found unhashable key", key_node.start_mark,
                )
            mapping.pop(key, None)
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


def _as_mapping(node: DocumentNode) -> dict | None:
    """Return the node if it is a mapping, None for any other shape."""
    return node if isinstance(node, dict) else None


def _last_entry(mapping: dict) -> tuple[str, DocumentNode]:
    key, value = list(mapping.items())[-1]
    return scalar_to_text(key), value


##########################################
################ ENCODE ##################
##########################################

def encode_query(query: StructuredQuery) -> dict[str, dict[str, dict[str, dict[str, str]]]]:
    """Build the nested document for a structured query.

    A filter on an attribute that already appeared replaces the earlier filter.

    Args:
        query (StructuredQuery): The query to encode.

    Returns:
        dict: ``{function: {model: {attribute: {condition: value}}}}``.
    """
    attributes: dict[str, dict[str, str]] = {}
    for query_filter in query.filters:
        attributes[query_filter.attribute] = {query_filter.condition: query_filter.condition_value}
    return {query.function: {query.model: attributes}}


def query_to_text(query: StructuredQuery) -> str:
    """Encode a structured query and render it as marker line plus YAML."""
    body = yaml.safe_dump(
        encode_query(query),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    return f"{DOCUMENT_MARKER}\n{body}"


##########################################
################ DECODE ##################
##########################################

def decode_document(document: DocumentNode) -> StructuredQuery:
    """Recover the structured query from a parsed document.

    Args:
        document (DocumentNode): The result of loading the document text.

    Returns:
        StructuredQuery: Function and model are empty strings when absent.

    Raises:
        QueryDocumentError: If the top level is neither empty nor a mapping.
    """
    if document is None:
        return StructuredQuery(function="", model="")
    functions = _as_mapping(document)
    if functions is None:
        raise QueryDocumentError(f"Query document must be a mapping, got {type(document).__name__}.")
    if not functions:
        return StructuredQuery(function="", model="")

    function, function_node = _last_entry(functions)
    models = _as_mapping(function_node)
    if not models:
        return StructuredQuery(function=function, model="")

    model, model_node = _last_entry(models)
    filters: list[Filter] = []
    for attribute, attribute_node in (_as_mapping(model_node) or {}).items():
        for condition, value in (_as_mapping(attribute_node) or {}).items():
            if not is_scalar(value):
                continue
            filters.append(
                Filter(
                    attribute=scalar_to_text(attribute),
                    condition=scalar_to_text(condition),
                    condition_value=scalar_to_text(value),
                )
            )
    return StructuredQuery(function=function, model=model, filters=filters)


def strip_document_marker(text: str) -> str:
    """Drop surrounding whitespace and a leading marker line, if there is one."""
    stripped = text.strip()
    if stripped.startswith(DOCUMENT_MARKER):
        _, _, stripped = stripped.partition("\n")
    return stripped.strip()


def query_from_text(text: str) -> StructuredQuery:
    """Parse query document text, with or without its marker line.

    Raises:
        QueryDocumentError: If the text is not valid YAML or not a mapping.
    """
    try:
        document = yaml.load(strip_document_marker(text), Loader=_LastKeyWinsLoader)
    except yaml.YAMLError as exc:
        raise QueryDocumentError(f"Failed to parse YAML: {exc}") from exc
    return decode_document(document)
