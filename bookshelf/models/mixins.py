"""Mixins for SQLAlchemy models."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, String, func


def generate_id() -> str:
    """Generate an opaque string primary key."""
    return str(uuid4())


class UUIDPrimaryKeyMixin:
    """Mixin to add an opaque UUID string primary key."""

    id = Column(String(36), primary_key=True, default=generate_id)


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
