"""
API endpoint modules for PrepCoach
"""

from prepcoach.api.endpoints import analytics, interview, metadata

__all__ = ["analytics", "interview", "metadata"]
