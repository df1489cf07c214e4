"""
Analytics API endpoints

Cross-session progress for the dashboard.
"""

from fastapi import APIRouter, Depends

from prepcoach.api.dependencies import get_orchestrator, get_owner_id
from prepcoach.core.interview_orchestrator import InterviewOrchestrator
from prepcoach.models.analytics import DashboardAnalytics

router = APIRouter()


@router.get("/dashboard", response_model=DashboardAnalytics)
async def get_dashboard(
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
):
    """Get dashboard analytics across all of the caller's sessions."""
    return await orchestrator.get_dashboard(owner_id)
