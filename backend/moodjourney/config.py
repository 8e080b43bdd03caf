"""
MoodJourney Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading; the database settings are
       checked before the server starts so a misconfigured deployment dies
       immediately instead of on the first request.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the database gateway and the entry point.

Environment:
    DB_HOST, DB_USER, DB_PASSWORD, DB_NAME   required (unless DATABASE_URL is set)
    DB_PORT                                  default "5432"
    DB_SSLMODE                               default "require"
    APP_PORT                                 default 3000
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url

from moodjourney.exceptions import FatalStartupError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Discrete PostgreSQL connection parameters (RDS style deployment)
    # Why separate fields: The hosting environment injects them one by one
    db_host: str = Field(default="", description="PostgreSQL host")
    db_port: str = Field(default="5432", description="PostgreSQL port")
    db_user: str = Field(default="", description="PostgreSQL user")
    db_password: str = Field(default="", description="PostgreSQL password")
    db_name: str = Field(default="", description="PostgreSQL database name")

    # What: asyncpg ssl mode; "require" keeps transport encrypted
    db_sslmode: str = Field(default="require")

    # What: Full SQLAlchemy URL override (e.g. sqlite+aiosqlite:///./dev.db)
    # When set, the DB_* parameters are ignored and not required
    database_url: Optional[str] = Field(default=None)

    # Echo SQL statements; noisy, only for debugging queries
    sql_echo: bool = Field(default=False)

    # ── Server ────────────────────────────────────────────────────────────
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Static Assets ─────────────────────────────────────────────────────
    # What: Built frontend served at "/" and "/prod"
    static_dir: str = Field(default="./dist")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required(self) -> None:
        """
        Checks that every required database variable is present.

        Raises:
            FatalStartupError: listing each missing variable. Callers treat
                this as unrecoverable and stop the process.
        """
        if self.database_url:
            return

        required = {
            "DB_HOST": self.db_host,
            "DB_USER": self.db_user,
            "DB_PASSWORD": self.db_password,
            "DB_NAME": self.db_name,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise FatalStartupError(
                message="Missing required environment variables: " + ", ".join(missing),
                context={"missing": missing},
            )

    @property
    def sqlalchemy_url(self) -> str:
        """Async SQLAlchemy URL; the override wins over the DB_* parameters."""
        if self.database_url:
            return self.database_url

        url = URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=int(self.db_port),
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)

    @property
    def safe_database_target(self) -> str:
        """Loggable description of the database (never includes the password)."""
        if self.database_url:
            return make_url(self.database_url).render_as_string(hide_password=True)
        return f"{self.db_host}:{self.db_port}/{self.db_name} as user {self.db_user}"

    @property
    def connect_args(self) -> Dict[str, Any]:
        """
        Driver arguments for the async engine.

        asyncpg gets an ssl mode (encrypted transport) and a UTC session time
        zone so timestamps are stored and compared in UTC. Other drivers
        (aiosqlite in tests) take no extra arguments.
        """
        if not self.sqlalchemy_url.startswith("postgresql+asyncpg"):
            return {}
        return {
            "ssl": self.db_sslmode,
            "server_settings": {"timezone": "UTC"},
        }


# Singleton instance — imported throughout the application
settings = Settings()
