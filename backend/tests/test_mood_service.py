"""
MoodJourney Backend — Mood Entry Service Unit Tests
====================================================

What:  Tests for MoodEntryService with a mocked session.

What we test:
    ✅ Mood rating range on create (1..10) and on update (non-zero only)
    ✅ Owner always comes from the path
    ✅ Partial update ignores 0 / "" / null and refreshes updated_at
    ✅ Soft delete stamps deleted_at
    ✅ Date parsing into a UTC [day, day + 24h) range
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from moodjourney.exceptions import InternalError, NotFoundError, ValidationError
from moodjourney.schemas.mood_entry import MoodEntryPayload
from moodjourney.services.mood_service import (
    MoodEntryService,
    parse_day_range,
    validate_mood_rating,
)


def fetch_returns(session, entry):
    result = MagicMock()
    result.scalar_one_or_none.return_value = entry
    session.execute = AsyncMock(return_value=result)


class TestMoodRatingRule:

    @pytest.mark.parametrize("rating", range(1, 11))
    def test_in_range_accepted(self, rating):
        validate_mood_rating(rating)

    @pytest.mark.parametrize("rating", [None, -1, 0, 11, 100])
    def test_out_of_range_rejected(self, rating):
        with pytest.raises(ValidationError, match="between 1 and 10"):
            validate_mood_rating(rating)


class TestParseDayRange:

    def test_half_open_utc_range(self):
        start, end = parse_day_range("2024-03-01")

        assert start == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 3, 2, tzinfo=timezone.utc)

    def test_leap_day(self):
        start, end = parse_day_range("2024-02-29")

        assert end == datetime(2024, 3, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["2024-13-01", "03/01/2024", "2024-02-30", "yesterday"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            parse_day_range(value)


class TestCreateEntry:

    def setup_method(self):
        self.service = MoodEntryService()

    @pytest.mark.asyncio
    async def test_owner_taken_from_path(self, assign_id_on_flush):
        payload = MoodEntryPayload(user_id="mallory", mood_rating=7, dream_type="vivid")

        result = await self.service.create_entry(assign_id_on_flush, "ava", payload)

        assert result.user_id == "ava"
        assert result.mood_rating == 7
        assert result.dream_type == "vivid"
        assert result.day_highlight == ""
        assert result.sleep_start_time == 0
        assert result.created_at == result.updated_at

    @pytest.mark.asyncio
    async def test_empty_owner_rejected(self, mock_db_session):
        with pytest.raises(ValidationError, match="User ID is required"):
            await self.service.create_entry(mock_db_session, "", MoodEntryPayload(mood_rating=5))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [None, 0, 11, -4])
    async def test_rating_out_of_range_rejected(self, mock_db_session, rating):
        with pytest.raises(ValidationError):
            await self.service.create_entry(
                mock_db_session, "ava", MoodEntryPayload(mood_rating=rating)
            )

        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_failure_is_internal(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception()))

        with pytest.raises(InternalError, match="Failed to create mood entry"):
            await self.service.create_entry(
                mock_db_session, "ava", MoodEntryPayload(mood_rating=5)
            )

        mock_db_session.rollback.assert_awaited_once()


class TestUpdateEntry:

    def setup_method(self):
        self.service = MoodEntryService()

    @pytest.mark.asyncio
    async def test_only_non_empty_fields_overwrite(self, mock_db_session, sample_entry):
        fetch_returns(mock_db_session, sample_entry)
        before = sample_entry.updated_at

        result = await self.service.update_entry(
            mock_db_session,
            "7",
            MoodEntryPayload(
                mood_rating=0,
                day_highlight="",
                dream_type=None,
                dream_notes="Falling, then waking",
                sleep_start_time=0,
                sleep_end_time=730,
            ),
        )

        assert result.mood_rating == 6
        assert result.day_highlight == "Long walk by the river"
        assert result.dream_type == "lucid"
        assert result.dream_notes == "Falling, then waking"
        assert result.sleep_start_time == 2330
        assert result.sleep_end_time == 730
        assert result.updated_at > before
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_payload_still_refreshes_updated_at(self, mock_db_session, sample_entry):
        fetch_returns(mock_db_session, sample_entry)
        before = sample_entry.updated_at

        result = await self.service.update_entry(mock_db_session, "7", MoodEntryPayload())

        assert result.mood_rating == 6
        assert result.updated_at > before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [11, -1])
    async def test_rating_out_of_range_rejected(self, mock_db_session, sample_entry, rating):
        fetch_returns(mock_db_session, sample_entry)

        with pytest.raises(ValidationError):
            await self.service.update_entry(
                mock_db_session, "7", MoodEntryPayload(mood_rating=rating)
            )

        assert sample_entry.mood_rating == 6
        mock_db_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_entry_checked_first(self, mock_db_session):
        fetch_returns(mock_db_session, None)

        # Out-of-range rating, but the entry lookup fails first
        with pytest.raises(NotFoundError, match="Mood entry not found"):
            await self.service.update_entry(
                mock_db_session, "99", MoodEntryPayload(mood_rating=11)
            )

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_not_found(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_entry(mock_db_session, "seven", MoodEntryPayload())

    @pytest.mark.asyncio
    async def test_id_beyond_integer_column_is_not_found(self, mock_db_session):
        with pytest.raises(NotFoundError, match="Mood entry not found"):
            await self.service.delete_entry(mock_db_session, "99999999999999999999")

        mock_db_session.execute.assert_not_called()


class TestDeleteEntry:

    def setup_method(self):
        self.service = MoodEntryService()

    @pytest.mark.asyncio
    async def test_soft_delete_stamps_deleted_at(self, mock_db_session, sample_entry):
        fetch_returns(mock_db_session, sample_entry)

        await self.service.delete_entry(mock_db_session, "7")

        assert sample_entry.deleted_at is not None
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_entry(self, mock_db_session):
        fetch_returns(mock_db_session, None)

        with pytest.raises(NotFoundError):
            await self.service.delete_entry(mock_db_session, "7")


class TestListEntries:

    def setup_method(self):
        self.service = MoodEntryService()

    @pytest.mark.asyncio
    async def test_empty(self, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_db_session.execute = AsyncMock(return_value=result)

        assert await self.service.list_entries(mock_db_session, user_id="ava") == []

    @pytest.mark.asyncio
    async def test_bad_date_rejected_before_query(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.list_entries(mock_db_session, day="2024-3-1x")

        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_failure_is_internal(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception()))

        with pytest.raises(InternalError, match="Failed to retrieve mood entries"):
            await self.service.list_entries(mock_db_session)
