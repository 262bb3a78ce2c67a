"""Pydantic models for persisted query documents."""

from pydantic import BaseModel


class SavedQueryListItem(BaseModel):
    id: int
    name: str


class SavedQuery(SavedQueryListItem):
    """A stored query document together with its bookkeeping timestamps."""

    query_string: str
    created_at: str | None = None
    updated_at: str | None = None
