"""File area for collection archives and user avatars."""
from storage.file_area import FileArea, LocalFileArea, archive_path, avatar_path

__all__ = ["FileArea", "LocalFileArea", "archive_path", "avatar_path"]
