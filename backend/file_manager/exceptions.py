"""Errors raised by the file store.

All of them are mapped to a 400 ``{"error": message}`` body in main.py.
"""


class FileStoreError(Exception):
    """Base class for file store failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FileValidationError(FileStoreError):
    """Upload rejected before any disk or database mutation."""


class FileRecordNotFound(FileStoreError):
    """Unknown file id, or a record whose file is missing on disk (or vice versa)."""


class FileStorageError(FileStoreError):
    """Filesystem or database failure during a store operation."""
