"""Pytest fixtures for testing."""
import os

# Must be set before any app imports that trigger Settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["STRIPE_SECRET_KEY"] = ""

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.billing import BillingCustomer
from core.passwords import hash_password
from models import Collection, Link, Tag, User, UsersAndCollections, WhitelistedUser
from models.base import Base
from services.account_service import AccountDeletionService
from services.collection_service import CollectionService

TEST_PASSWORD = "correct horse battery staple"


class RecordingFileArea:
    """File area that records calls instead of touching the filesystem."""

    def __init__(self) -> None:
        self.created: list[str] = []
        self.removed: list[str] = []
        self.fail = False

    def create_folder(self, file_path: str) -> None:
        if self.fail:
            raise OSError("disk full")
        self.created.append(file_path)

    def remove_folder(self, file_path: str) -> None:
        if self.fail:
            raise OSError("permission denied")
        self.removed.append(file_path)


class FakeBillingClient:
    """In-memory billing provider."""

    def __init__(
        self,
        customers: list[BillingCustomer] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.customers = customers or []
        self.error = error
        self.lookups: list[str] = []
        self.cancelled: list[tuple[str, str | None, str | None]] = []

    async def list_customers_by_email(self, email: str) -> list[BillingCustomer]:
        self.lookups.append(email)
        if self.error is not None:
            raise self.error
        return self.customers

    async def cancel_subscription(
        self,
        subscription_id: str,
        comment: str | None = None,
        feedback: str | None = None,
    ) -> dict[str, Any]:
        self.cancelled.append((subscription_id, comment, feedback))
        return {
            "id": subscription_id,
            "object": "subscription",
            "status": "canceled",
            "cancellation_details": {"comment": comment, "feedback": feedback},
        }


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def file_area() -> RecordingFileArea:
    return RecordingFileArea()


@pytest.fixture
def deletion_service(file_area: RecordingFileArea) -> AccountDeletionService:
    """Deletion service with billing disabled."""
    return AccountDeletionService(file_area=file_area)


@pytest.fixture
def collection_service(file_area: RecordingFileArea) -> CollectionService:
    return CollectionService(file_area=file_area)


@pytest.fixture
def make_user(
    db_session: AsyncSession,
) -> Callable[..., Coroutine[Any, Any, User]]:
    """Create and commit a user whose password is TEST_PASSWORD."""

    async def _make_user(
        username: str = "alice",
        email: str | None = "Alice@Example.com",
        password: str = TEST_PASSWORD,
    ) -> User:
        user = User(
            name=username.title(),
            username=username,
            email=email,
            password=hash_password(password, rounds=4),
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def populate_account(
    db_session: AsyncSession,
) -> Callable[..., Coroutine[Any, Any, dict[str, list[int]]]]:
    """
    Give a user a nested collection tree with links, tags, whitelist entries and
    a member, and return the ids of everything created.
    """

    async def _populate(user: User, member: User) -> dict[str, list[int]]:
        parent = Collection(owner_id=user.id, name="Reading")
        db_session.add(parent)
        await db_session.flush()
        child = Collection(owner_id=user.id, name="Papers", parent_id=parent.id)
        db_session.add(child)
        await db_session.flush()

        links = [
            Link(name="SQLAlchemy", url="https://www.sqlalchemy.org/", collection_id=parent.id),
            Link(name="FastAPI", url="https://fastapi.tiangolo.com/", collection_id=child.id),
        ]
        tags = [Tag(owner_id=user.id, name="python")]
        whitelist = [WhitelistedUser(user_id=user.id, username=member.username or "")]
        membership = UsersAndCollections(
            user_id=member.id,
            collection_id=parent.id,
            can_create=True,
        )
        db_session.add_all([*links, *tags, *whitelist, membership])
        await db_session.commit()
        return {
            "collections": [parent.id, child.id],
            "links": [link.id for link in links],
            "tags": [tag.id for tag in tags],
            "whitelist": [entry.id for entry in whitelist],
        }

    return _populate


@pytest.fixture
async def client(
    session_factory: async_sessionmaker,
    deletion_service: AccountDeletionService,
    collection_service: CollectionService,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session and service overrides."""
    from api.dependencies import get_account_deletion_service, get_collection_service
    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_account_deletion_service] = lambda: deletion_service
    app.dependency_overrides[get_collection_service] = lambda: collection_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
