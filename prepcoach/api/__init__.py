"""
API layer for PrepCoach

Contains FastAPI routers for:
- Interview session management
- Reference metadata
"""

from prepcoach.api.router import api_router

__all__ = ["api_router"]
