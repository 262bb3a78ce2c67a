from fastapi import APIRouter, HTTPException, Request

from server.models.requests import SavedQueryRequest
from server.models.responses import CreatedResponse, SuccessResponse
from shared.clients.store.StoreClientInterface import SavedQueryConflictError, SavedQueryNotFoundError
from shared.models.saved_query import SavedQuery, SavedQueryListItem

router = APIRouter(prefix="/queries", tags=["queries"])


@router.get("")
def list_queries(request: Request) -> list[SavedQueryListItem]:
    return request.app.state.query_service.list_saved()


@router.post("")
def create_query(request: Request, body: SavedQueryRequest) -> CreatedResponse:
    """Store a query document under a unique name.

    Raises:
        HTTPException: 409 if the name is taken.
    """
    try:
        query_id = request.app.state.query_service.create_saved(body.name, body.query_string)
    except SavedQueryConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return CreatedResponse(id=query_id)


@router.get("/{query_id}")
def get_query(request: Request, query_id: int) -> SavedQuery:
    try:
        return request.app.state.query_service.get_saved(query_id)
    except SavedQueryNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Query not found: {e}")


@router.put("/{query_id}")
def update_query(request: Request, query_id: int, body: SavedQueryRequest) -> SuccessResponse:
    """Replace name and document of a saved query.

    Raises:
        HTTPException: 404 for an unknown id, 409 if the new name is taken.
    """
    try:
        request.app.state.query_service.update_saved(query_id, body.name, body.query_string)
    except SavedQueryNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Query not found: {e}")
    except SavedQueryConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SuccessResponse()


@router.delete("/{query_id}")
def delete_query(request: Request, query_id: int) -> SuccessResponse:
    try:
        request.app.state.query_service.delete_saved(query_id)
    except SavedQueryNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Query not found: {e}")
    return SuccessResponse()
