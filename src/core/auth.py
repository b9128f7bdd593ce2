"""
Caller identity.

Session handling and token validation happen upstream; the authenticated user id
reaches this service in the X-User-Id header.
"""
import logging

from fastapi import Header, HTTPException, status

logger = logging.getLogger(__name__)


async def get_current_user_id(
    x_user_id: str | None = Header(default=None),
) -> int:
    """
    Return the authenticated user's id.

    Raises:
        HTTPException: 401 if the header is missing or not a positive integer.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        user_id = int(x_user_id)
    except ValueError:
        logger.warning("Rejected malformed X-User-Id header: %r", x_user_id)
        user_id = 0
    if user_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )
    return user_id
