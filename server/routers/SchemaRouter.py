from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from services.schema_ingest.SchemaIngestor import SchemaDocumentError
from shared.clients.schema.SchemaSourceInterface import SchemaSourceError
from shared.models.catalog import ModelWithAttributes

router = APIRouter(tags=["schema"])


@router.post("/load-schema", response_class=PlainTextResponse)
async def load_schema(request: Request) -> str:
    """Read the configured schema document and refresh the model catalog.

    Raises:
        HTTPException: 500 if the schema cannot be read or parsed.
    """
    schema_service = request.app.state.schema_service
    try:
        result = await schema_service.load_schema()
    except SchemaSourceError as e:
        raise HTTPException(status_code=500, detail=f"Failed to read schema file: {e}")
    except SchemaDocumentError as e:
        raise HTTPException(status_code=500, detail=f"Failed to parse schema: {e}")
    return f"Successfully loaded schema. Processed {result.attributes} attributes."


@router.get("/models")
def get_models(request: Request) -> list[ModelWithAttributes]:
    """List every model with its attribute names, sorted by name."""
    schema_service = request.app.state.schema_service
    return schema_service.list_models()
