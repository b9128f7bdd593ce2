"""Collection endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_collection_service, get_current_user_id
from api.responses import to_json_response
from schemas.collection import CollectionCreate
from services.collection_service import CollectionService

router = APIRouter(prefix="/collections", tags=["collections"])


@router.post("/")
async def create_collection(
    data: CollectionCreate,
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    service: CollectionService = Depends(get_collection_service),
) -> JSONResponse:
    """
    Create a collection, optionally nested under one of the caller's collections.

    Returns 400 for a blank or duplicate name and 403 when the parent is not
    owned by the caller.
    """
    result = await service.create_collection(db, data, current_user_id)
    return to_json_response(result)
