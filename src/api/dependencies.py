"""FastAPI dependencies for injection."""
from functools import lru_cache

from core.auth import get_current_user_id
from core.billing import build_billing_client
from core.config import get_settings
from db.session import get_async_session
from services.account_service import AccountDeletionService
from services.collection_service import CollectionService
from storage.file_area import LocalFileArea


@lru_cache
def get_file_area() -> LocalFileArea:
    """File area rooted at the configured storage folder."""
    return LocalFileArea(get_settings().storage_folder)


@lru_cache
def get_account_deletion_service() -> AccountDeletionService:
    """Build the deletion service once; billing is resolved from settings here."""
    return AccountDeletionService(
        file_area=get_file_area(),
        billing=build_billing_client(get_settings()),
    )


@lru_cache
def get_collection_service() -> CollectionService:
    """Build the collection service once."""
    return CollectionService(file_area=get_file_area())


__all__ = [
    "get_account_deletion_service",
    "get_async_session",
    "get_collection_service",
    "get_current_user_id",
    "get_file_area",
    "get_settings",
]
