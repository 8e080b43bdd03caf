"""
MoodJourney Backend — User Service
===================================

What:  Business logic for users: create, fetch by id, fetch by username,
       and create-or-get.
Who:   Called by the /v1/users route handlers.

Error Handling Strategy:
    - Empty username/email                 → ValidationError (400)
    - No live row                          → NotFoundError (404)
    - Unique violation on plain create     → ConflictError (409)
    - Any other database failure           → InternalError (500)
    The session is rolled back before a database error is re-raised so the
    request's session dependency can still close it cleanly.

Design Decision:
    UserService is stateless; it receives the session for each call. The
    session itself comes from the database gateway via dependency injection.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from moodjourney.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from moodjourney.models.mixins import parse_row_id, utcnow
from moodjourney.models.user import User
from moodjourney.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class UserService:
    """
    Responsibilities:
        - create_user(): insert with uniqueness conflict detection
        - get_user(): lookup by numeric id
        - get_user_by_username(): lookup by the `username` query parameter
        - create_or_get_user(): return the existing user or insert a new one
    """

    async def create_user(self, db: AsyncSession, payload: UserCreate) -> UserResponse:
        """
        Insert a new user.

        Raises:
            ValidationError: username or email is empty
            ConflictError: username or email already taken
            InternalError: any other database failure
        """
        username, email = self._require_identity(payload)
        user = self._new_user(username, email)

        try:
            db.add(user)
            await db.flush()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("User create conflict for username=%s: %s", username, str(e.orig))
            raise ConflictError(
                message="User with this username or email already exists",
                context={"username": username},
            )
        except Exception as e:
            await db.rollback()
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise InternalError(
                message="Failed to create user",
                context={"error_type": type(e).__name__},
            )

        logger.info("User created: id=%s username=%s", user.id, user.username)
        return UserResponse.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: str) -> UserResponse:
        """
        Fetch a live user by id.

        `user_id` arrives as the raw path segment; anything that is not an
        id the column can hold cannot match a row and is reported as not found.
        """
        pk = parse_row_id(user_id)
        if pk is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        user = await self._first(db, select(User).where(User.id == pk, User.not_deleted()))
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return UserResponse.model_validate(user)

    async def get_user_by_username(
        self, db: AsyncSession, username: Optional[str]
    ) -> UserResponse:
        """
        Fetch a live user by username.

        Only the first match is returned; uniqueness is a schema constraint,
        not something this method re-checks.
        """
        if not username:
            raise ValidationError(message="username is required", field="username")

        user = await self._find_by_username(db, username)
        if user is None:
            raise NotFoundError(resource="user", resource_id=username)
        return UserResponse.model_validate(user)

    async def create_or_get_user(
        self, db: AsyncSession, payload: UserCreate
    ) -> tuple[UserResponse, bool]:
        """
        Return the live user with this username, creating it if absent.

        The supplied email is NOT compared with an existing record's email;
        a match on username alone is enough.

        Returns:
            (user, created) where `created` is False when no write happened.

        Raises:
            ValidationError: username or email is empty
            InternalError: lookup or insert failed (including a collision on
                email with some other user)
        """
        username, email = self._require_identity(payload)

        existing = await self._find_by_username(db, username)
        if existing is not None:
            logger.info("create-or-get: user %s already exists (id=%s)", username, existing.id)
            return UserResponse.model_validate(existing), False

        user = self._new_user(username, email)
        try:
            db.add(user)
            await db.flush()
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Database error in create-or-get for %s: %s", username, str(e))
            raise InternalError(
                message="Failed to create user",
                context={"error_type": type(e).__name__},
            )

        logger.info("create-or-get: user created id=%s username=%s", user.id, username)
        return UserResponse.model_validate(user), True

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _require_identity(payload: UserCreate) -> tuple[str, str]:
        username = payload.username or ""
        email = payload.email or ""
        if not username or not email:
            raise ValidationError(message="Username and email are required")
        return username, email

    @staticmethod
    def _new_user(username: str, email: str) -> User:
        # One clock read so created_at == updated_at on insert
        now = utcnow()
        return User(
            username=username,
            email=email,
            created_at=now,
            updated_at=now,
            deleted_at=None,
        )

    async def _find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        return await self._first(
            db,
            select(User)
            .where(User.username == username, User.not_deleted())
            .order_by(User.id)
            .limit(1),
        )

    @staticmethod
    async def _first(db: AsyncSession, query) -> Optional[User]:
        try:
            result = await db.execute(query)
            return result.scalars().first()
        except Exception as e:
            logger.error("Database error looking up user: %s", str(e))
            raise InternalError(
                message="Failed to retrieve user",
                context={"error_type": type(e).__name__},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
