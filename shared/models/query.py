"""Pydantic models for the structured side of the query transcoder."""

from pydantic import BaseModel


class Filter(BaseModel):
    """A single attribute filter, e.g. ``age gt 30``.

    All values travel as text. Numeric or date semantics belong to the UI.
    """

    attribute: str
    condition: str
    condition_value: str


class StructuredQuery(BaseModel):
    """A flat conjunction of filters applied to one model under one function.

    Attribute names are expected to be unique within ``filters``; the document
    form keys filters by attribute, so a later duplicate replaces an earlier one.
    """

    function: str
    model: str
    filters: list[Filter] = []
