"""
MoodJourney Backend — Entry Point
==================================

Usage:
    python -m moodjourney        (or the `moodjourney` console script)

Checks configuration before handing control to uvicorn so a missing DB_*
variable ends the process with status 1 and a clear log line. A database
that cannot be reached is detected in the app's lifespan; uvicorn then
aborts startup with a non-zero status.
"""

import logging
import sys

import uvicorn

from moodjourney.config import settings
from moodjourney.exceptions import FatalStartupError
from moodjourney.main import setup_logging

logger = logging.getLogger("moodjourney")


def main() -> int:
    setup_logging()

    try:
        settings.validate_required()
    except FatalStartupError as e:
        logger.critical("Configuration error: %s", e.message)
        return 1

    logger.info("Server starting on port %d", settings.app_port)
    uvicorn.run(
        "moodjourney.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
