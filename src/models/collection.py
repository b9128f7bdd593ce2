"""Collection model - folder-like container for links, optionally nested."""
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.link import Link
    from models.user import User
    from models.users_and_collections import UsersAndCollections

DEFAULT_COLLECTION_COLOR = "#0ea5e9"


class Collection(Base, TimestampMixin):
    """
    Collection model - owned by exactly one user.

    Names are unique per owner across all of the owner's collections (not just
    siblings); the unique constraint is the authoritative guard against concurrent
    creators, the service-level pre-check only produces a friendlier error.
    """

    __tablename__ = "collections"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_collections_owner_id_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    color: Mapped[str] = mapped_column(String(50), default=DEFAULT_COLLECTION_COLOR)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    owner: Mapped["User"] = relationship(back_populates="collections")
    parent: Mapped["Collection | None"] = relationship(
        back_populates="sub_collections",
        remote_side="Collection.id",
    )
    sub_collections: Mapped[list["Collection"]] = relationship(back_populates="parent")
    links: Mapped[list["Link"]] = relationship(back_populates="collection")
    members: Mapped[list["UsersAndCollections"]] = relationship(back_populates="collection")
