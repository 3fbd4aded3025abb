"""Files API routes."""
from typing import Optional
from urllib.parse import quote
from uuid import UUID
from fastapi import APIRouter, Depends, Form, Query, Response, UploadFile, File as FastAPIFile

from file_manager.models.file_record import FileRecord
from file_manager.schemas.common import ErrorResponse
from file_manager.schemas.file import FileMetadataResponse
from file_manager.services.file_store import Candidate, FileStoreManager, get_file_store

# Not authenticated: `user` is recorded as uploader_id but never checked.
router = APIRouter(
    prefix="/api/files",
    tags=["files"],
    responses={400: {"model": ErrorResponse}},
)


@router.get("", response_model=list[FileMetadataResponse])
async def list_files(
    group: Optional[str] = Query(None, description="Only files in this group"),
    store: FileStoreManager = Depends(get_file_store),
):
    """List file metadata, optionally filtered by group."""
    records = await store.list_files(group_id=group)
    return [_to_response(r) for r in records]


@router.post("/upload", response_model=FileMetadataResponse)
async def upload_file(
    file: UploadFile = FastAPIFile(...),
    user: Optional[str] = Form(None),
    group: Optional[str] = Form(None),
    tag: Optional[str] = Form(None),
    store: FileStoreManager = Depends(get_file_store),
):
    """Upload a file, replacing any existing file with the same name."""
    if file.size is not None:
        store.check_size(file.size)
    contents = await file.read()
    candidate = Candidate(
        name=file.filename or "",
        content_type=file.content_type,
        data=contents,
    )
    record = await store.store(candidate, uploader_id=user, group_id=group, owner_tag=tag)
    return _to_response(record)


@router.get("/{file_id}/metadata", response_model=FileMetadataResponse)
async def get_file_metadata(
    file_id: UUID,
    store: FileStoreManager = Depends(get_file_store),
):
    """Get file metadata by ID."""
    return _to_response(await store.fetch_metadata(file_id))


@router.get("/{file_id}/download")
async def download_file(
    file_id: UUID,
    store: FileStoreManager = Depends(get_file_store),
):
    """Download a file by ID."""
    record = await store.fetch_metadata(file_id)
    contents = await store.fetch_bytes(file_id)

    return Response(
        content=contents,
        media_type=record.content_type or "application/octet-stream",
        headers={"Content-Disposition": _content_disposition(record.name)},
    )


@router.delete("/{file_id}/delete", status_code=204)
async def delete_file(
    file_id: UUID,
    store: FileStoreManager = Depends(get_file_store),
):
    """Delete a file and its record."""
    await store.delete(file_id)
    return Response(status_code=204)


def _to_response(record: FileRecord) -> dict:
    """Convert SQLAlchemy model to response dict."""
    return {
        "id": record.id,
        "name": record.name,
        "content_type": record.content_type,
        "size_bytes": record.size_bytes,
        "uploaded_at": record.uploaded_at,
        "owner_tag": record.owner_tag,
        "group_id": record.group_id,
        "uploader_id": record.uploader_id,
    }


def _content_disposition(filename: str) -> str:
    """Attachment header. Names that need escaping also get an RFC 5987 filename*."""
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    fallback = "".join(c if " " <= c <= "~" and c not in '"\\' else "_" for c in filename)
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quoted}"
