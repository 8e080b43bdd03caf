"""
MoodJourney Backend — Application Package Initializer
=====================================================

What: Marks the `moodjourney` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is a thin layered FastAPI service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, one query each
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database Gateway (Persistence)  │  ← Async engine + sessions
    └─────────────────────────────────────┘

    Routes parse the request and pick a status code, services hold the rules
    (mood rating range, soft-delete filtering, create-or-get), and the
    gateway owns the engine for the lifetime of the app.
"""

__version__ = "1.0.0"
