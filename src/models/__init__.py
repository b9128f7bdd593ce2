"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.collection import DEFAULT_COLLECTION_COLOR, Collection
from models.link import Link
from models.tag import Tag
from models.user import User
from models.users_and_collections import UsersAndCollections
from models.whitelisted_user import WhitelistedUser

__all__ = [
    "DEFAULT_COLLECTION_COLOR",
    "Base",
    "Collection",
    "Link",
    "Tag",
    "TimestampMixin",
    "User",
    "UsersAndCollections",
    "WhitelistedUser",
]
