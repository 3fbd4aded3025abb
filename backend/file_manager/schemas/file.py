"""File response schemas."""
import uuid
from typing import Optional
from datetime import datetime
from file_manager.schemas.base import CamelORMModel


class FileMetadataResponse(CamelORMModel):
    id: uuid.UUID
    name: str
    content_type: str
    size_bytes: int
    uploaded_at: datetime
    owner_tag: Optional[str] = None
    group_id: Optional[str] = None
    uploader_id: Optional[str] = None
