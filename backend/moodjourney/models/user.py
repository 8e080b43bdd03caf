"""
MoodJourney Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
Who:   Used by UserService for create, lookup and create-or-get.

Table Design:
    - Integer primary key: clients address users as /users/{id}
    - username / email: each UNIQUE and NOT NULL; an insert that collides
      surfaces as IntegrityError, which the service turns into a 409
    - No update or delete endpoint exists; rows only ever get inserted
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from moodjourney.database import Base
from moodjourney.models.mixins import TimestampMixin


class User(TimestampMixin, Base):
    """A journal owner, identified by a unique username and email."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Unique login-style handle",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Unique contact address",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
