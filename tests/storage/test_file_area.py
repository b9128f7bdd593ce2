"""Tests for the local file area."""
import logging
from pathlib import Path

import pytest

from storage import LocalFileArea, archive_path, avatar_path


@pytest.fixture
def area(tmp_path: Path) -> LocalFileArea:
    return LocalFileArea(tmp_path / "data")


def test__create_folder__creates_nested_folders(area: LocalFileArea) -> None:
    area.create_folder(archive_path(7))

    assert (area.root / "archives" / "7").is_dir()


def test__create_folder__is_idempotent(area: LocalFileArea) -> None:
    area.create_folder("archives/7")
    area.create_folder("archives/7")

    assert (area.root / "archives" / "7").is_dir()


def test__remove_folder__removes_directory_with_contents(area: LocalFileArea) -> None:
    area.create_folder("archives/7")
    (area.root / "archives" / "7" / "1.pdf").write_bytes(b"%PDF-1.4")

    area.remove_folder("archives/7")

    assert not (area.root / "archives" / "7").exists()
    assert (area.root / "archives").is_dir()


def test__remove_folder__removes_single_file(area: LocalFileArea) -> None:
    area.create_folder("uploads/avatar")
    avatar = area.root / "uploads" / "avatar" / "3.jpg"
    avatar.write_bytes(b"\xff\xd8\xff")

    area.remove_folder(avatar_path(3))

    assert not avatar.exists()


def test__remove_folder__missing_path_is_noop(area: LocalFileArea) -> None:
    area.remove_folder("archives/404")

    assert not (area.root / "archives" / "404").exists()


def test__resolve__rejects_paths_outside_root(area: LocalFileArea) -> None:
    with pytest.raises(ValueError, match="outside the storage root"):
        area.resolve("../escape")


def test__remove_folder__never_escapes_root(
    tmp_path: Path,
    area: LocalFileArea,
    caplog: pytest.LogCaptureFixture,
) -> None:
    outside = tmp_path / "keep-me"
    outside.mkdir()

    with caplog.at_level(logging.WARNING, logger="storage.file_area"):
        area.remove_folder("../keep-me")

    assert outside.is_dir()
    assert "Failed to remove ../keep-me" in caplog.text


def test__remove_folder__refuses_storage_root(area: LocalFileArea) -> None:
    area.create_folder("archives/1")

    area.remove_folder(".")

    assert (area.root / "archives" / "1").is_dir()


def test__create_folder__os_error_is_logged_not_raised(
    area: LocalFileArea,
    caplog: pytest.LogCaptureFixture,
) -> None:
    area.root.mkdir(parents=True)
    # A file where a parent folder should be
    (area.root / "archives").write_text("not a folder")

    with caplog.at_level(logging.WARNING, logger="storage.file_area"):
        area.create_folder("archives/1")

    assert "Failed to create folder archives/1" in caplog.text


def test__archive_and_avatar_paths() -> None:
    assert archive_path(12) == "archives/12"
    assert avatar_path(3) == "uploads/avatar/3.jpg"
