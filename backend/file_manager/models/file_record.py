"""FileRecord model - file metadata (actual bytes live under the storage root)."""
import uuid
from datetime import datetime
from sqlalchemy import String, BigInteger, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from file_manager.models.base import Base, TimestampMixin, OwnershipMixin


class FileRecord(Base, TimestampMixin, OwnershipMixin):
    __tablename__ = "files"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(500), nullable=False, unique=True, index=True)
    storage_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<FileRecord id={self.id} name={self.name!r} size={self.size_bytes}>"
