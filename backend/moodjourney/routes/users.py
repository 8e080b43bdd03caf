"""
MoodJourney Backend — User Route Handlers
==========================================

What:  POST /v1/users/, POST /v1/users/create-or-get, GET /v1/users/{id},
       GET /v1/users/?username=
How:   Extracts body/path/query values, delegates to UserService, wraps the
       result in the success envelope.
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from moodjourney.database import get_db_session
from moodjourney.schemas.common import ErrorResponse
from moodjourney.schemas.user import (
    UserCreate,
    UserCreateOrGetResult,
    UserResult,
)
from moodjourney.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, response_model=UserResult, include_in_schema=False)
@router.post(
    "/",
    status_code=201,
    response_model=UserResult,
    responses={
        400: {"description": "Invalid body or missing username/email", "model": ErrorResponse},
        409: {"description": "Username or email already taken", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserCreate = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> UserResult:
    user = await user_service.create_user(db, payload)
    return UserResult(data=user)


@router.post(
    "/create-or-get",
    response_model=UserCreateOrGetResult,
    responses={
        200: {"description": "User already existed; nothing written"},
        201: {"description": "User created"},
        400: {"description": "Invalid body or missing username/email", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Return the user with this username, creating it if needed",
)
async def create_or_get_user(
    response: Response,
    payload: UserCreate = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> UserCreateOrGetResult:
    """
    Idempotent user creation keyed on username.

    200 + "User already exists" when a live user with the username exists
    (its email is returned as stored, even if the body differs); otherwise
    201 + "User created successfully".
    """
    user, created = await user_service.create_or_get_user(db, payload)
    logger.info("Create-or-get for %s: %s", user.username, "created" if created else "existing")
    if created:
        response.status_code = 201
        return UserCreateOrGetResult(data=user, message="User created successfully")
    return UserCreateOrGetResult(data=user, message="User already exists")


@router.get("", response_model=UserResult, include_in_schema=False)
@router.get(
    "/",
    response_model=UserResult,
    responses={
        400: {"description": "username query parameter missing", "model": ErrorResponse},
        404: {"description": "No such user", "model": ErrorResponse},
    },
    summary="Get a user by username",
)
async def get_user_by_username(
    username: str | None = Query(default=None, description="Exact username to look up"),
    db: AsyncSession = Depends(get_db_session),
) -> UserResult:
    user = await user_service.get_user_by_username(db, username)
    return UserResult(data=user)


@router.get(
    "/{user_id}",
    response_model=UserResult,
    responses={
        404: {"description": "No such user", "model": ErrorResponse},
    },
    summary="Get a user by numeric id",
)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> UserResult:
    user = await user_service.get_user(db, user_id)
    return UserResult(data=user)
