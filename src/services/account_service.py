"""
Service layer for irreversible account deletion.

The cascade runs as one transaction in dependency order. Folder removals are
collected as descriptors while the transaction runs and executed only after
commit, so a rolled-back deletion never touches the file area. Billing
cancellation also happens after commit. Neither side effect can change the
result of a committed deletion.
"""
import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.billing import BillingClient
from core.passwords import verify_password
from models.collection import Collection
from models.link import Link
from models.tag import Tag
from models.user import User
from models.users_and_collections import UsersAndCollections
from models.whitelisted_user import WhitelistedUser
from schemas.user import CancellationDetails, DeleteAccountRequest
from services.exceptions import (
    NotFoundError,
    ServiceError,
    SideEffectFailure,
    TransactionFailureError,
    UnauthorizedError,
)
from services.results import ServiceResult
from storage.file_area import FileArea, archive_path, avatar_path

logger = logging.getLogger(__name__)

ACCOUNT_DELETED_MESSAGE = "User account and all related data deleted successfully."


@dataclass(frozen=True)
class FolderRemoval:
    """A file-area removal deferred until the deletion commits."""

    path: str


async def delete_account_rows(db: AsyncSession, user_id: int) -> list[FolderRemoval]:
    """
    Delete a user and everything it transitively owns.

    Runs inside the caller's transaction and does not commit. The user row is
    locked first so a concurrent deletion of the same account waits here and
    then finds nothing.

    Args:
        db: Database session with an open transaction.
        user_id: The account to delete.

    Returns:
        Folder removals to perform once the transaction has committed.

    Raises:
        NotFoundError: If the user no longer exists.
    """
    locked = await db.execute(
        select(User.id).where(User.id == user_id).with_for_update(),
    )
    if locked.scalar_one_or_none() is None:
        raise NotFoundError("User not found.")

    removals: list[FolderRemoval] = []

    await db.execute(
        delete(WhitelistedUser).where(WhitelistedUser.user_id == user_id),
    )

    owned_collection_ids = select(Collection.id).where(Collection.owner_id == user_id)
    await db.execute(
        delete(Link)
        .where(Link.collection_id.in_(owned_collection_ids))
        .execution_options(synchronize_session=False),
    )

    await db.execute(delete(Tag).where(Tag.owner_id == user_id))

    result = await db.execute(
        select(Collection.id).where(Collection.owner_id == user_id).order_by(Collection.id),
    )
    for collection_id in result.scalars().all():
        await db.execute(
            delete(UsersAndCollections).where(
                UsersAndCollections.collection_id == collection_id,
            ),
        )
        removals.append(FolderRemoval(archive_path(collection_id)))

    # Memberships the user holds in other people's collections
    await db.execute(
        delete(UsersAndCollections).where(UsersAndCollections.user_id == user_id),
    )

    await db.execute(
        delete(Collection)
        .where(Collection.owner_id == user_id)
        .execution_options(synchronize_session=False),
    )

    removals.append(FolderRemoval(avatar_path(user_id)))

    deleted = await db.execute(
        delete(User).where(User.id == user_id).execution_options(synchronize_session=False),
    )
    if deleted.rowcount == 0:
        raise NotFoundError("User not found.")

    return removals


class AccountDeletionService:
    """
    Validates credentials, runs the cascade and triggers best-effort cleanup.

    The billing client is optional; whether billing is enabled is decided once,
    here, and never re-read per request.
    """

    def __init__(
        self,
        file_area: FileArea,
        billing: BillingClient | None = None,
        credential_verifier: Callable[[str, str], bool] = verify_password,
    ) -> None:
        self.file_area = file_area
        self.billing = billing
        self._verify_password = credential_verifier

    @property
    def billing_enabled(self) -> bool:
        return self.billing is not None

    async def delete_account(
        self,
        db: AsyncSession,
        user_id: int,
        body: DeleteAccountRequest,
    ) -> ServiceResult:
        """
        Delete the account after verifying the password.

        Commits the session on success and rolls it back on failure.

        Returns:
            404 if the user does not exist, 401 on a wrong password, 500 if the
            transaction fails, otherwise 200 with either the cancelled
            subscription record or a generic success message.
        """
        try:
            email = await self._verify_credentials(db, user_id, body.password)
            removals = await self._run_cascade(db, user_id)
        except ServiceError as e:
            return e.to_result()
        except SQLAlchemyError:
            logger.exception("Account lookup failed for user %s", user_id)
            await db.rollback()
            return TransactionFailureError("Failed to delete user account.").to_result()

        logger.info("Deleted user %s and all related data", user_id)
        self._remove_folders(removals)

        cancelled = await self._cancel_subscription(email, body.cancellation_details)
        if cancelled is not None:
            return ServiceResult(response=cancelled, status=200)
        return ServiceResult(response=ACCOUNT_DELETED_MESSAGE, status=200)

    async def _verify_credentials(
        self,
        db: AsyncSession,
        user_id: int,
        password: str,
    ) -> str | None:
        """Return the user's email once the password checks out."""
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        # bcrypt is CPU-bound; keep it off the event loop.
        if not await asyncio.to_thread(self._verify_password, password, user.password):
            raise UnauthorizedError("Invalid password.")
        return user.email

    async def _run_cascade(self, db: AsyncSession, user_id: int) -> list[FolderRemoval]:
        try:
            removals = await delete_account_rows(db, user_id)
            await db.commit()
        except NotFoundError:
            await db.rollback()
            raise
        except SQLAlchemyError:
            logger.exception("Account deletion transaction failed for user %s", user_id)
            await db.rollback()
            raise TransactionFailureError("Failed to delete user account.")
        # Identity map still holds the deleted user
        db.expunge_all()
        return removals

    def _remove_folders(self, removals: list[FolderRemoval]) -> None:
        for removal in removals:
            try:
                self.file_area.remove_folder(removal.path)
            except Exception as e:
                logger.warning("%s", SideEffectFailure(f"remove {removal.path}", e))

    async def _cancel_subscription(
        self,
        email: str | None,
        details: CancellationDetails | None,
    ) -> dict | None:
        """
        Cancel the user's billing subscription, if any.

        "No customer for this email" and "customer without subscriptions" both
        return None, the same as billing being disabled.
        """
        if self.billing is None or not email:
            return None

        try:
            customers = await self.billing.list_customers_by_email(email.lower())
            subscription_id = next(
                (
                    customer.subscription_ids[0]
                    for customer in customers
                    if customer.subscription_ids
                ),
                None,
            )
            if subscription_id is None:
                logger.info(
                    "No billing subscription to cancel (%d matching customers)",
                    len(customers),
                )
                return None
            return await self.billing.cancel_subscription(
                subscription_id,
                comment=details.comment if details else None,
                feedback=details.feedback if details else None,
            )
        except Exception as e:
            logger.warning("%s", SideEffectFailure("billing cancellation", e), exc_info=True)
            return None
