"""
MoodJourney Backend — Mood Entry Service
=========================================

What:  Business logic for mood entries: list with filters, create, partial
       update and soft delete.
Who:   Called by the /v1/moods route handlers.

Partial Update Semantics:
    The update payload is applied field by field, and only values that are
    non-empty (strings) or non-zero (integers) overwrite the stored record.
    0, "" and null are all read as "not provided", so a client cannot clear
    a field through this endpoint.

Concurrency:
    update_entry() fetches the row and then saves it in a second statement
    with no lock or version check. Two concurrent updates of one entry race
    and the last commit wins.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moodjourney.exceptions import InternalError, NotFoundError, ValidationError
from moodjourney.models.mixins import parse_row_id, utcnow
from moodjourney.models.mood_entry import MoodEntry
from moodjourney.schemas.mood_entry import (
    MOOD_RATING_MAX,
    MOOD_RATING_MIN,
    MoodEntryPayload,
    MoodEntryResponse,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Payload fields a partial update may overwrite
TEXT_FIELDS = ("day_highlight", "dream_type", "dream_notes")
INT_FIELDS = ("mood_rating", "sleep_start_time", "sleep_end_time")


def parse_day_range(value: str) -> tuple[datetime, datetime]:
    """
    Turn a YYYY-MM-DD string into the UTC half-open range [day, day + 24h).

    Raises:
        ValidationError: the string is not a valid calendar date
    """
    try:
        day: date = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(message="Invalid date format. Use YYYY-MM-DD", field="date")

    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(hours=24)


def validate_mood_rating(rating: Optional[int]) -> None:
    """Raise ValidationError unless 1 <= rating <= 10."""
    if rating is None or not MOOD_RATING_MIN <= rating <= MOOD_RATING_MAX:
        raise ValidationError(
            message=f"Mood rating must be between {MOOD_RATING_MIN} and {MOOD_RATING_MAX}",
            field="mood_rating",
            context={"mood_rating": rating},
        )


class MoodEntryService:
    """
    Responsibilities:
        - list_entries(): optional user_id / date filters, live rows only
        - create_entry(): owner from the path, rating checked, timestamps set
        - update_entry(): fetch, patch non-empty fields, save
        - delete_entry(): fetch, set deleted_at
    """

    async def list_entries(
        self,
        db: AsyncSession,
        user_id: Optional[str] = None,
        day: Optional[str] = None,
    ) -> List[MoodEntryResponse]:
        """
        List live entries, optionally for one user and/or one UTC day.

        Filters combine with AND. The date range is inclusive at midnight and
        exclusive at the next midnight.

        Raises:
            ValidationError: `day` is present but not YYYY-MM-DD
            InternalError: query failed
        """
        query = select(MoodEntry).where(MoodEntry.not_deleted())

        if user_id:
            query = query.where(MoodEntry.user_id == user_id)

        if day:
            start, end = parse_day_range(day)
            query = query.where(MoodEntry.created_at >= start, MoodEntry.created_at < end)

        query = query.order_by(MoodEntry.created_at, MoodEntry.id)

        try:
            result = await db.execute(query)
            entries = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing mood entries: %s", str(e), exc_info=True)
            raise InternalError(
                message="Failed to retrieve mood entries",
                context={"error_type": type(e).__name__},
            )

        return [MoodEntryResponse.model_validate(entry) for entry in entries]

    async def create_entry(
        self, db: AsyncSession, user_id: str, payload: MoodEntryPayload
    ) -> MoodEntryResponse:
        """
        Store a new entry owned by `user_id` (taken from the URL path).

        Any `user_id` in the payload is discarded. The owner is not checked
        against the users table.

        Raises:
            ValidationError: empty owner, or rating outside [1, 10]
            InternalError: insert failed
        """
        if not user_id:
            raise ValidationError(message="User ID is required", field="userId")

        validate_mood_rating(payload.mood_rating)

        now = utcnow()
        entry = MoodEntry(
            user_id=user_id,
            mood_rating=payload.mood_rating,
            day_highlight=payload.day_highlight or "",
            dream_type=payload.dream_type or "",
            dream_notes=payload.dream_notes or "",
            sleep_start_time=payload.sleep_start_time or 0,
            sleep_end_time=payload.sleep_end_time or 0,
            created_at=now,
            updated_at=now,
            deleted_at=None,
        )

        try:
            db.add(entry)
            await db.flush()
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Database error creating mood entry: %s", str(e), exc_info=True)
            raise InternalError(
                message="Failed to create mood entry",
                context={"error_type": type(e).__name__, "user_id": user_id},
            )

        logger.info("Mood entry created: id=%s user_id=%s", entry.id, user_id)
        return MoodEntryResponse.model_validate(entry)

    async def update_entry(
        self, db: AsyncSession, entry_id: str, payload: MoodEntryPayload
    ) -> MoodEntryResponse:
        """
        Patch a live entry with the non-empty / non-zero payload values.

        `updated_at` is refreshed even when nothing else changes.

        Raises:
            NotFoundError: no live entry with this id
            ValidationError: non-zero rating outside [1, 10]
            InternalError: lookup or save failed
        """
        entry = await self._get_live_entry(db, entry_id)

        if payload.mood_rating:
            validate_mood_rating(payload.mood_rating)

        for field in INT_FIELDS + TEXT_FIELDS:
            value = getattr(payload, field)
            if value:
                setattr(entry, field, value)
        entry.updated_at = utcnow()

        try:
            db.add(entry)
            await db.flush()
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Database error updating mood entry %s: %s", entry_id, str(e))
            raise InternalError(
                message="Failed to update mood entry",
                context={"error_type": type(e).__name__, "entry_id": entry_id},
            )

        logger.info("Mood entry updated: id=%s", entry.id)
        return MoodEntryResponse.model_validate(entry)

    async def delete_entry(self, db: AsyncSession, entry_id: str) -> None:
        """
        Soft-delete a live entry by stamping `deleted_at`.

        Raises:
            NotFoundError: no live entry with this id
            InternalError: lookup or save failed
        """
        entry = await self._get_live_entry(db, entry_id)
        entry.deleted_at = utcnow()

        try:
            await db.flush()
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Database error deleting mood entry %s: %s", entry_id, str(e))
            raise InternalError(
                message="Failed to delete mood entry",
                context={"error_type": type(e).__name__, "entry_id": entry_id},
            )

        logger.info("Mood entry soft-deleted: id=%s", entry.id)

    async def _get_live_entry(self, db: AsyncSession, entry_id: str) -> MoodEntry:
        pk = parse_row_id(entry_id)
        if pk is None:
            raise NotFoundError(resource="mood entry", resource_id=str(entry_id))

        try:
            result = await db.execute(
                select(MoodEntry).where(MoodEntry.id == pk, MoodEntry.not_deleted())
            )
            entry = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching mood entry %s: %s", entry_id, str(e))
            raise InternalError(
                message="Failed to retrieve mood entry",
                context={"error_type": type(e).__name__},
            )

        if entry is None:
            raise NotFoundError(resource="mood entry", resource_id=str(entry_id))
        return entry


# ── Singleton Instance ────────────────────────────────────────────────────
mood_entry_service = MoodEntryService()
