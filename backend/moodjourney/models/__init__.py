"""
MoodJourney Backend — ORM Models
=================================

Importing this package registers every table on `Base.metadata`, which the
database gateway uses to create the schema at startup.
"""

from moodjourney.models.mood_entry import MoodEntry
from moodjourney.models.user import User

__all__ = ["MoodEntry", "User"]
