"""
MoodJourney Backend — Shared Model Columns
===========================================

What:  Timestamp and soft-delete columns shared by `users` and `mood_entries`,
       plus the bounds of their integer primary keys.

Soft delete:
    A row is never removed by the API. Deleting sets `deleted_at`; every
    query goes through `not_deleted()` so marked rows behave as missing.
    `deleted_at` is indexed because it appears in every WHERE clause.

Time zones:
    PostgreSQL returns aware values for TIMESTAMP WITH TIME ZONE, SQLite
    returns naive ones. UTCDateTime normalizes both directions so records
    always carry UTC, whichever driver loaded them.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# Signed 32-bit range of an INTEGER primary key
INTEGER_ID_MIN = -(2**31)
INTEGER_ID_MAX = 2**31 - 1


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def parse_row_id(value) -> Optional[int]:
    """
    Turn a raw path segment into a primary key value.

    Returns None when the segment is not an integer or falls outside what
    the column can store; no row can have such an id.
    """
    try:
        pk = int(value)
    except (TypeError, ValueError):
        return None
    if not INTEGER_ID_MIN <= pk <= INTEGER_ID_MAX:
        return None
    return pk


class UTCDateTime(TypeDecorator):
    """DateTime(timezone=True) that always binds and loads aware UTC values."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class TimestampMixin:
    """created_at / updated_at / deleted_at, all stored in UTC."""

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        comment="When this row was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        comment="Last modification (UTC)",
    )

    # NULL = live row; a timestamp = logically deleted
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(),
        nullable=True,
        default=None,
        index=True,
        comment="Soft-delete marker (UTC); NULL while the row is live",
    )

    @classmethod
    def not_deleted(cls):
        """WHERE clause selecting live rows only."""
        return cls.deleted_at.is_(None)
