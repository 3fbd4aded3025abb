"""Import all models so SQLAlchemy metadata knows about them."""
from file_manager.models.base import Base
from file_manager.models.file_record import FileRecord

__all__ = ["Base", "FileRecord"]
