from pydantic import BaseModel


class CreatedResponse(BaseModel):
    id: int


class SuccessResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    status: str
    version: str
    store: bool
    schema_source: bool
