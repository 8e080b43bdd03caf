"""
MoodJourney Backend — MoodEntry SQLAlchemy Model
=================================================

What:  ORM model for the `mood_entries` table.
Who:   Used by MoodEntryService for listing, creation, partial update and
       soft delete.

Table Design Rationale:
    - user_id is a plain string, NOT a foreign key: entries are keyed by
      whatever identifier the client puts in the URL (usually the username),
      and may reference a user that does not exist
    - mood_rating: 1-10 scale, enforced by the service rather than a CHECK
      constraint so the client gets a readable 400
    - sleep_start_time / sleep_end_time: opaque integers chosen by the client
    - Text columns default to "" so a partial update can treat "" as
      "not provided"

Query Patterns:
    - Entries of one user on one day:
      WHERE user_id = :uid AND created_at >= :day AND created_at < :day + 1
      AND deleted_at IS NULL
      → idx_mood_entries_user_created covers the first two predicates
"""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from moodjourney.database import Base
from moodjourney.models.mixins import TimestampMixin


class MoodEntry(TimestampMixin, Base):
    """
    One journal record: a mood rating plus day and sleep/dream notes.

    Lifecycle:
        1. Created for the user named in the URL path
        2. Patched field by field (non-empty / non-zero values only)
        3. Soft-deleted; afterwards invisible to every endpoint
    """

    __tablename__ = "mood_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Owner identifier from the URL path (not a foreign key)",
    )

    mood_rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Self-reported mood, 1-10",
    )

    day_highlight: Mapped[str] = mapped_column(Text, nullable=False, default="")
    dream_type: Mapped[str] = mapped_column(Text, nullable=False, default="")
    dream_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    sleep_start_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sleep_end_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_mood_entries_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<MoodEntry(id={self.id}, user_id='{self.user_id}', "
            f"mood_rating={self.mood_rating})>"
        )
