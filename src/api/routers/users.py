"""User account endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_account_deletion_service,
    get_async_session,
    get_current_user_id,
)
from api.responses import to_json_response
from schemas.user import DeleteAccountRequest
from services.account_service import AccountDeletionService


router = APIRouter(prefix="/users", tags=["users"])


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    body: DeleteAccountRequest,
    current_user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    service: AccountDeletionService = Depends(get_account_deletion_service),
) -> JSONResponse:
    """
    Permanently delete an account and everything it owns.

    Requires the account password. Cancels the billing subscription when billing
    is configured and one exists; the cancelled subscription is returned in that
    case, otherwise a success message.

    Returns 403 when deleting someone else's account, 401 on a wrong password,
    404 if the account does not exist.
    """
    if user_id != current_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own account.",
        )
    result = await service.delete_account(db, user_id, body)
    return to_json_response(result)
