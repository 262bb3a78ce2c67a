from pydantic import BaseModel


class ParseQueryRequest(BaseModel):
    query_string: str


class SavedQueryRequest(BaseModel):
    name: str
    query_string: str
