# Routes package init
"""
MoodJourney Backend — API Routes Package
=========================================

Route Inventory (each mounted under /api and /prod/api):
    - health.py:  GET    /v1/health
    - users.py:   POST   /v1/users/
                  POST   /v1/users/create-or-get
                  GET    /v1/users/{id}
                  GET    /v1/users/?username=
    - moods.py:   GET    /v1/moods/?user_id=&date=
                  POST   /v1/moods/user/{userId}
                  PUT    /v1/moods/{id}
                  DELETE /v1/moods/{id}

Design Principle:
    Routes are THIN: extract parameters, call the service, wrap the result
    in the success envelope and pick the status code. Errors are raised by
    services and rendered by the global exception handlers in main.py.
"""

from fastapi import APIRouter

from moodjourney.routes import health, moods, users

API_PREFIXES = ("/api", "/prod/api")


def build_api_router() -> APIRouter:
    """The /v1 route tree, ready to be included under any prefix."""
    router = APIRouter(prefix="/v1")
    router.include_router(health.router)
    router.include_router(users.router)
    router.include_router(moods.router)
    return router
