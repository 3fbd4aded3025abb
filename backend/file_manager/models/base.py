"""SQLAlchemy declarative base and shared mixins."""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class TimestampMixin:
    """Adds created_at and updated_at columns."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class OwnershipMixin:
    """Classification columns. Informational only until auth is added."""
    uploader_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    group_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    owner_tag: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
