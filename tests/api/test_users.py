"""Tests for the account deletion endpoint."""
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import TEST_PASSWORD, RecordingFileArea
from models import Collection, User
from services.account_service import ACCOUNT_DELETED_MESSAGE


async def test_delete_own_account(
    client: AsyncClient,
    db_session: AsyncSession,
    file_area: RecordingFileArea,
    make_user,
    populate_account,
) -> None:
    """End to end: nested collections, links, tags and members are all removed."""
    user = await make_user("alice")
    member = await make_user("bob", email="bob@example.com")
    user_id = user.id
    ids = await populate_account(user, member)

    response = await client.request(
        "DELETE",
        f"/users/{user_id}",
        json={"password": TEST_PASSWORD},
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 200
    assert response.json() == {"response": ACCOUNT_DELETED_MESSAGE}
    assert await db_session.scalar(
        select(func.count()).select_from(User).where(User.id == user_id),
    ) == 0
    assert await db_session.scalar(
        select(func.count()).select_from(Collection).where(
            Collection.id.in_(ids["collections"]),
        ),
    ) == 0
    assert f"uploads/avatar/{user_id}.jpg" in file_area.removed


async def test_delete_account_wrong_password(
    client: AsyncClient,
    db_session: AsyncSession,
    make_user,
) -> None:
    user = await make_user("alice")
    user_id = user.id

    response = await client.request(
        "DELETE",
        f"/users/{user_id}",
        json={"password": "guess"},
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 401
    assert response.json() == {"response": "Invalid password."}
    assert await db_session.scalar(
        select(func.count()).select_from(User).where(User.id == user_id),
    ) == 1


async def test_delete_missing_account(client: AsyncClient) -> None:
    response = await client.request(
        "DELETE",
        "/users/77",
        json={"password": TEST_PASSWORD},
        headers={"X-User-Id": "77"},
    )

    assert response.status_code == 404
    assert response.json() == {"response": "User not found."}


async def test_delete_someone_elses_account_forbidden(
    client: AsyncClient,
    make_user,
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob", email="bob@example.com")

    response = await client.request(
        "DELETE",
        f"/users/{bob.id}",
        json={"password": TEST_PASSWORD},
        headers={"X-User-Id": str(alice.id)},
    )

    assert response.status_code == 403


async def test_delete_account_requires_identity(client: AsyncClient) -> None:
    response = await client.request("DELETE", "/users/1", json={"password": "x"})

    assert response.status_code == 401


async def test_delete_account_rejects_unknown_feedback(
    client: AsyncClient,
    make_user,
) -> None:
    user = await make_user("alice")

    response = await client.request(
        "DELETE",
        f"/users/{user.id}",
        json={
            "password": TEST_PASSWORD,
            "cancellation_details": {"feedback": "because"},
        },
        headers={"X-User-Id": str(user.id)},
    )

    assert response.status_code == 422
