"""File store manager.

Keeps the bytes under the storage root and the matching FileRecord row
in step across store, overwrite and delete. Disk and database writes are
not coordinated into one transaction: an overwrite is delete-then-write,
and a delete removes the file before the row.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from file_manager.config import Settings, settings
from file_manager.database import get_db
from file_manager.exceptions import FileRecordNotFound, FileStorageError, FileValidationError
from file_manager.models.file_record import FileRecord
from file_manager.services.file_storage import LocalFileStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileStoreConfig:
    storage_root: str
    max_size_bytes: int
    allowed_types: frozenset[str]

    @classmethod
    def from_settings(cls, s: Settings) -> "FileStoreConfig":
        return cls(
            storage_root=s.FILE_STORAGE_PATH,
            max_size_bytes=s.FILE_MAX_SIZE,
            allowed_types=s.allowed_types,
        )


@dataclass
class Candidate:
    """An uploaded payload before validation."""
    name: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class FileStoreManager:
    """Validates uploads and owns the name -> path mapping for stored files."""

    def __init__(
        self,
        config: FileStoreConfig,
        db: AsyncSession,
        storage: Optional[LocalFileStorage] = None,
    ):
        self.config = config
        self.db = db
        self.storage = storage or LocalFileStorage(config.storage_root)

    def validate(self, candidate: Candidate) -> None:
        """Reject empty, oversized, badly named or disallowed uploads. No side effects."""
        if candidate.size == 0:
            raise FileValidationError("The file is empty")
        self.check_size(candidate.size)
        if candidate.content_type not in self.config.allowed_types:
            raise FileValidationError(f"File type not allowed: {candidate.content_type}")

        name = candidate.name or ""
        if not name or name in (".", "..") or PurePath(name).name != name or "\\" in name:
            raise FileValidationError(f"Invalid file name: {name!r}")

    def check_size(self, size: int) -> None:
        """Reject a payload larger than the configured maximum.

        Also called with the declared upload size before the body is read.
        """
        if size > self.config.max_size_bytes:
            raise FileValidationError(
                f"The file exceeds the maximum allowed size of "
                f"{self.config.max_size_bytes // 1024} KB"
            )

    async def store(
        self,
        candidate: Candidate,
        uploader_id: Optional[str] = None,
        group_id: Optional[str] = None,
        owner_tag: Optional[str] = None,
    ) -> FileRecord:
        """Write the payload and insert or update its record.

        Re-uploading an existing name replaces the bytes and keeps the record id.
        """
        self.validate(candidate)

        try:
            await self.storage.ensure_root()
            path = self.storage.path_for(candidate.name)
            file_exists = await self.storage.exists(path)
        except OSError as e:
            raise FileStorageError(str(e)) from e

        async with self._database():
            record = await self._get_by_name(candidate.name)
        if file_exists:
            if record is None:
                logger.warning("File %s exists on disk with no matching record", path)
                raise FileRecordNotFound(f"No metadata found for existing file: {candidate.name}")
            try:
                await self.storage.delete(path)
            except OSError as e:
                raise FileStorageError(str(e)) from e
        elif record is not None:
            logger.warning("Record %s had no file on disk; rewriting %s", record.id, path)

        try:
            await self.storage.write(path, candidate.data)
        except OSError as e:
            raise FileStorageError(str(e)) from e

        is_new = record is None
        async with self._database():
            if is_new:
                record = FileRecord(id=uuid.uuid4(), name=candidate.name)
                self.db.add(record)

            record.storage_path = str(path)
            record.content_type = candidate.content_type
            record.size_bytes = candidate.size
            record.uploaded_at = datetime.now(timezone.utc)
            # Classification fields left out of a re-upload keep their previous values
            if uploader_id is not None:
                record.uploader_id = uploader_id
            if group_id is not None:
                record.group_id = group_id
            if owner_tag is not None:
                record.owner_tag = owner_tag

            await self.db.commit()
            await self.db.refresh(record)

        logger.info(
            "%s file %s (%d bytes) as %s",
            "Stored" if is_new else "Replaced", record.name, record.size_bytes, record.id,
        )
        return record

    async def fetch_metadata(self, file_id: uuid.UUID) -> FileRecord:
        result = await self.db.execute(
            select(FileRecord).where(FileRecord.id == file_id)
        )
        record = result.scalar_one_or_none()
        if not record:
            raise FileRecordNotFound(f"File not found with ID: {file_id}")
        return record

    async def fetch_bytes(self, file_id: uuid.UUID) -> bytes:
        """Read the whole stored file. Fails if the record's file is gone."""
        record = await self.fetch_metadata(file_id)
        if not await self.storage.exists(record.storage_path):
            logger.warning("Record %s points at missing file %s", record.id, record.storage_path)
            raise FileRecordNotFound(f"File {record.name} is missing from storage")
        try:
            return await self.storage.read(record.storage_path)
        except OSError as e:
            raise FileStorageError(str(e)) from e

    async def delete(self, file_id: uuid.UUID) -> None:
        """Remove the file (if present) and then its record."""
        async with self._database():
            record = await self.fetch_metadata(file_id)
        name = record.name
        try:
            removed = await self.storage.delete(record.storage_path)
        except OSError as e:
            raise FileStorageError(f"Error deleting file: {e}") from e
        if not removed:
            logger.info("File %s was already missing; removing record only", record.storage_path)

        async with self._database():
            await self.db.delete(record)
            await self.db.commit()
        logger.info("Deleted file %s (%s)", name, file_id)

    async def list_files(self, group_id: Optional[str] = None) -> list[FileRecord]:
        query = select(FileRecord)
        if group_id is not None:
            query = query.where(FileRecord.group_id == group_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_group(self, group_id: str) -> list[FileRecord]:
        return await self.list_files(group_id=group_id)

    async def _get_by_name(self, name: str) -> Optional[FileRecord]:
        result = await self.db.execute(
            select(FileRecord).where(FileRecord.name == name)
        )
        return result.scalar_one_or_none()

    @asynccontextmanager
    async def _database(self):
        """Roll back and raise FileStorageError on any database failure."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise FileStorageError(str(e)) from e


def get_file_store(db: AsyncSession = Depends(get_db)) -> FileStoreManager:
    """FastAPI dependency that builds a manager for the request's session."""
    return FileStoreManager(FileStoreConfig.from_settings(settings), db)
