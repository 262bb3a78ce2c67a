from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from server.models.requests import ParseQueryRequest
from services.query_transcoder.QueryTranscoder import QueryDocumentError
from shared.models.query import StructuredQuery

router = APIRouter(tags=["query"])


@router.post("/generate")
def generate_query(request: Request, body: StructuredQuery) -> Response:
    """Turn a filter builder selection into query document text.

    Args:
        request (Request): FastAPI request (provides app.state.query_service).
        body (StructuredQuery): Function, model and filters.

    Returns:
        Response: The document as ``application/x-yaml``.
    """
    query_service = request.app.state.query_service
    return Response(content=query_service.generate(body), media_type="application/x-yaml")


@router.post("/parse-query")
def parse_query(request: Request, body: ParseQueryRequest) -> StructuredQuery:
    """Load query document text back into the filter builder shape.

    Raises:
        HTTPException: 400 if the text is not a query document.
    """
    query_service = request.app.state.query_service
    try:
        return query_service.parse(body.query_string)
    except QueryDocumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
