"""Service layer for collection creation."""
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.collection import DEFAULT_COLLECTION_COLOR, Collection
from models.link import Link
from models.users_and_collections import UsersAndCollections
from schemas.collection import CollectionCreate, CollectionResponse
from services.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    ServiceError,
    SideEffectFailure,
    TransactionFailureError,
)
from services.results import ServiceResult
from storage.file_area import FileArea, archive_path

logger = logging.getLogger(__name__)

# Postgres names the constraint; SQLite names the columns.
_DUPLICATE_NAME_MARKERS = (
    "uq_collections_owner_id_name",
    "collections.owner_id, collections.name",
)


def normalize_name(name: str | None) -> str:
    """
    Trim a proposed collection name.

    Raises:
        InvalidInputError: If the name is missing or blank.
    """
    if name is None or not name.strip():
        raise InvalidInputError("Please enter a valid collection.")
    return name.strip()


async def check_parent_ownership(
    db: AsyncSession,
    parent_id: object,
    owner_id: int,
) -> None:
    """
    Ensure a proposed parent exists, has a numeric id and belongs to the owner.

    Raises:
        ForbiddenError: If any of those checks fails.
    """
    forbidden = ForbiddenError("You are not authorized to create a sub-collection here.")
    if isinstance(parent_id, bool) or not isinstance(parent_id, int):
        raise forbidden
    parent_owner_id = await db.scalar(
        select(Collection.owner_id).where(Collection.id == parent_id),
    )
    if parent_owner_id != owner_id:
        raise forbidden


async def collection_name_exists(db: AsyncSession, owner_id: int, name: str) -> bool:
    """Check whether the owner already has a collection with this exact name."""
    existing = await db.scalar(
        select(Collection.id).where(
            Collection.owner_id == owner_id,
            Collection.name == name,
        ),
    )
    return existing is not None


def is_duplicate_name_violation(error: IntegrityError) -> bool:
    """Check whether an integrity error came from the per-owner name constraint."""
    message = str(error.orig)
    return any(marker in message for marker in _DUPLICATE_NAME_MARKERS)


async def get_collection_with_counts(
    db: AsyncSession,
    collection_id: int,
) -> CollectionResponse | None:
    """Load a collection with its link count and members (with user display fields)."""
    collection = await db.scalar(
        select(Collection)
        .where(Collection.id == collection_id)
        .options(
            selectinload(Collection.members).selectinload(UsersAndCollections.user),
        )
        .execution_options(populate_existing=True),
    )
    if collection is None:
        return None
    link_count = await db.scalar(
        select(func.count(Link.id)).where(Link.collection_id == collection_id),
    )
    response = CollectionResponse.model_validate(collection)
    response.link_count = link_count or 0
    return response


class CollectionService:
    """Validates, persists and provisions storage for new collections."""

    def __init__(self, file_area: FileArea) -> None:
        self.file_area = file_area

    async def create_collection(
        self,
        db: AsyncSession,
        data: CollectionCreate,
        owner_id: int,
    ) -> ServiceResult:
        """
        Create a collection for the owner.

        Gates run in order and short-circuit before any write: blank name (400),
        parent not owned or not numeric (403), duplicate name for this owner (400).
        The row is committed before its archive folder is created, so the folder
        only ever exists for a persisted collection. Database failures roll back
        and map to a generic 500.

        Returns:
            200 with the created collection (link count and members included).
        """
        try:
            name = normalize_name(data.name)
            if data.parent_id:
                await check_parent_ownership(db, data.parent_id, owner_id)
            if await collection_name_exists(db, owner_id, name):
                raise ConflictError("Oops! There's already a Collection with that name.")
            collection = await self._insert(db, data, name, owner_id)
            created = await get_collection_with_counts(db, collection.id)
            await db.commit()
        except ServiceError as e:
            return e.to_result()
        except SQLAlchemyError:
            logger.exception("Failed to create collection for user %s", owner_id)
            await db.rollback()
            return TransactionFailureError("Failed to create collection.").to_result()

        self._create_archive_folder(collection.id)
        logger.info("Created collection %s for user %s", collection.id, owner_id)
        return ServiceResult(response=created.model_dump(mode="json"), status=200)

    def _create_archive_folder(self, collection_id: int) -> None:
        path = archive_path(collection_id)
        try:
            self.file_area.create_folder(path)
        except Exception as e:
            logger.warning("%s", SideEffectFailure(f"create {path}", e))

    async def _insert(
        self,
        db: AsyncSession,
        data: CollectionCreate,
        name: str,
        owner_id: int,
    ) -> Collection:
        collection = Collection(
            owner_id=owner_id,
            name=name,
            description=data.description or "",
            color=data.color or DEFAULT_COLLECTION_COLOR,
            is_public=data.is_public,
            parent_id=data.parent_id if data.parent_id else None,
        )
        db.add(collection)
        try:
            await db.flush()
        except IntegrityError as e:
            if not is_duplicate_name_violation(e):
                raise
            # Lost a race with a concurrent creator on (owner_id, name); nothing
            # else has been written in this request, so rolling back is safe.
            await db.rollback()
            raise ConflictError("Oops! There's already a Collection with that name.")
        await db.refresh(collection)
        return collection
