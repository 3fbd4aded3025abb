"""Local filesystem storage for uploaded file bytes.

Raises plain OSError; FileStoreManager decides what an I/O failure means.
"""
import os
import aiofiles
import aiofiles.os
from pathlib import Path


class LocalFileStorage:
    """Handles file read/write under a single storage root."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    async def ensure_root(self) -> None:
        """Create the storage root (and parents) if it does not exist."""
        await aiofiles.os.makedirs(self.root, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.root / name

    async def exists(self, path: str | Path) -> bool:
        return await aiofiles.os.path.isfile(path)

    async def write(self, path: str | Path, data: bytes) -> None:
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

    async def read(self, path: str | Path) -> bytes:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def delete(self, path: str | Path) -> bool:
        """Delete a file. Returns False if it was already gone."""
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        return True

    def __repr__(self) -> str:
        return f"LocalFileStorage(root={os.fspath(self.root)!r})"
