"""
Main API router for PrepCoach

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from prepcoach.api.endpoints import analytics, interview, metadata

api_router = APIRouter()

api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)

api_router.include_router(
    analytics.router,
    prefix="/analytics",
    tags=["Analytics"]
)
