"""Unit Tests: settings parsing and FileStoreConfig."""

import pytest

from file_manager.config import Settings
from file_manager.services.file_store import FileStoreConfig


@pytest.mark.unit
def test_allowed_types_are_split_and_trimmed():
    s = Settings(FILE_ALLOWED_TYPES=" application/pdf, image/png ,,text/plain")

    assert s.allowed_types == frozenset({"application/pdf", "image/png", "text/plain"})


@pytest.mark.unit
def test_store_config_from_settings(monkeypatch):
    monkeypatch.setenv("FILE_STORAGE_PATH", "/srv/files")
    monkeypatch.setenv("FILE_MAX_SIZE", "2048")
    monkeypatch.setenv("FILE_ALLOWED_TYPES", "image/png")

    config = FileStoreConfig.from_settings(Settings())

    assert config == FileStoreConfig(
        storage_root="/srv/files",
        max_size_bytes=2048,
        allowed_types=frozenset({"image/png"}),
    )


@pytest.mark.unit
def test_store_config_is_immutable():
    config = FileStoreConfig(storage_root="x", max_size_bytes=1, allowed_types=frozenset())

    with pytest.raises(AttributeError):
        config.max_size_bytes = 2
