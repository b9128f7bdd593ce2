"""
File area capability.

Folders live outside the relational store, so their lifecycle is kept in sync by
the services on a best-effort basis: every operation logs failures and returns
normally. Logical paths are relative to the storage root, e.g. ``archives/12``
or ``uploads/avatar/3.jpg``.
"""
import logging
import shutil
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


def archive_path(collection_id: int) -> str:
    """Logical path of a collection's archive folder."""
    return f"archives/{collection_id}"


def avatar_path(user_id: int) -> str:
    """Logical path of a user's avatar image."""
    return f"uploads/avatar/{user_id}.jpg"


class FileArea(Protocol):
    """Create/remove storage folders by logical path."""

    def create_folder(self, file_path: str) -> None:
        """Create the folder (and parents) if it does not already exist."""
        ...

    def remove_folder(self, file_path: str) -> None:
        """Remove the folder or file at the path; missing paths are ignored."""
        ...


class LocalFileArea:
    """FileArea backed by the local filesystem under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def resolve(self, file_path: str) -> Path:
        """
        Map a logical path to an absolute path under the root.

        Raises:
            ValueError: If the path escapes the storage root.
        """
        target = (self.root / file_path).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValueError(f"Path '{file_path}' is outside the storage root")
        return target

    def create_folder(self, file_path: str) -> None:
        """Create a folder by logical path."""
        try:
            self.resolve(file_path).mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            logger.warning("Failed to create folder %s: %s", file_path, e)

    def remove_folder(self, file_path: str) -> None:
        """Remove a folder (recursively) or a single file by logical path."""
        try:
            target = self.resolve(file_path)
            if target == self.root:
                raise ValueError("Refusing to remove the storage root")
            if target.is_dir():
                shutil.rmtree(target)
            elif target.exists():
                target.unlink()
        except (OSError, ValueError) as e:
            logger.warning("Failed to remove %s: %s", file_path, e)
