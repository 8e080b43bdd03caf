"""
MoodJourney Backend — Mood Entry Route Handlers
================================================

What:  GET /v1/moods/, POST /v1/moods/user/{userId}, PUT /v1/moods/{id},
       DELETE /v1/moods/{id}
How:   Extracts parameters, delegates to MoodEntryService, wraps results in
       the success envelope.
"""

import logging

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from moodjourney.database import get_db_session
from moodjourney.schemas.common import ErrorResponse, MessageResponse
from moodjourney.schemas.mood_entry import (
    MoodEntryListResult,
    MoodEntryPayload,
    MoodEntryResult,
)
from moodjourney.services.mood_service import mood_entry_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moods", tags=["Mood Entries"])


@router.get("", response_model=MoodEntryListResult, include_in_schema=False)
@router.get(
    "/",
    response_model=MoodEntryListResult,
    responses={
        400: {"description": "Malformed date filter", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="List mood entries",
)
async def list_mood_entries(
    user_id: str | None = Query(default=None, description="Only entries of this owner"),
    date: str | None = Query(
        default=None,
        description="Only entries created on this UTC day (YYYY-MM-DD)",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> MoodEntryListResult:
    entries = await mood_entry_service.list_entries(db, user_id=user_id, day=date)
    logger.debug("Listed %d mood entries (user_id=%s, date=%s)", len(entries), user_id, date)
    return MoodEntryListResult(data=entries)


@router.post(
    "/user/{user_id}",
    status_code=201,
    response_model=MoodEntryResult,
    responses={
        400: {"description": "Invalid body or mood rating", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Create a mood entry for a user",
)
async def create_mood_entry(
    user_id: str,
    payload: MoodEntryPayload = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> MoodEntryResult:
    """The owner is always the path segment; `user_id` in the body is ignored."""
    entry = await mood_entry_service.create_entry(db, user_id.strip(), payload)
    return MoodEntryResult(data=entry)


@router.put(
    "/{entry_id}",
    response_model=MoodEntryResult,
    responses={
        400: {"description": "Invalid body or mood rating", "model": ErrorResponse},
        404: {"description": "No such mood entry", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Partially update a mood entry",
)
async def update_mood_entry(
    entry_id: str,
    payload: MoodEntryPayload = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> MoodEntryResult:
    entry = await mood_entry_service.update_entry(db, entry_id, payload)
    return MoodEntryResult(data=entry)


@router.delete(
    "/{entry_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "No such mood entry", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Soft-delete a mood entry",
)
async def delete_mood_entry(
    entry_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await mood_entry_service.delete_entry(db, entry_id)
    return MessageResponse(message="Mood entry deleted successfully")
