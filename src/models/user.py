"""User model - account owner of collections, tags and whitelist entries."""
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.collection import Collection
    from models.tag import Tag
    from models.users_and_collections import UsersAndCollections
    from models.whitelisted_user import WhitelistedUser


class User(Base, TimestampMixin):
    """User model - identity record with a bcrypt password hash."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    username: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    email: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        comment="Used (lower-cased) to correlate the account with billing customers",
    )
    password: Mapped[str] = mapped_column(String(255), comment="bcrypt hash")
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)

    collections: Mapped[list["Collection"]] = relationship(back_populates="owner")
    tags: Mapped[list["Tag"]] = relationship(back_populates="owner")
    memberships: Mapped[list["UsersAndCollections"]] = relationship(back_populates="user")
    whitelisted_users: Mapped[list["WhitelistedUser"]] = relationship(back_populates="user")
