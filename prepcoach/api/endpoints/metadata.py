"""
Metadata API endpoints

Provides reference data for:
- Interview types
- Subjects
- Difficulty levels
"""

from fastapi import APIRouter
from pydantic import BaseModel

from prepcoach.models.interview import InterviewDifficulty, InterviewType, Subject

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class OptionInfo(BaseModel):
    """A selectable value and its display name."""
    id: str
    name: str


class DifficultyInfo(OptionInfo):
    """A session difficulty and the question bucket it maps to."""
    question_difficulty: str


def _display_name(value: str) -> str:
    if value == "c++":
        return "C++"
    if len(value) <= 3:
        return value.upper()
    return value.replace("-", " ").title()


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/types")
async def get_interview_types() -> list[OptionInfo]:
    """Get all interview types."""
    return [OptionInfo(id=t.value, name=_display_name(t.value)) for t in InterviewType]


@router.get("/subjects")
async def get_subjects() -> list[OptionInfo]:
    """Get all subjects."""
    return [OptionInfo(id=s.value, name=_display_name(s.value)) for s in Subject]


@router.get("/difficulties")
async def get_difficulties() -> list[DifficultyInfo]:
    """Get session difficulty levels."""
    return [
        DifficultyInfo(
            id=d.value,
            name=_display_name(d.value),
            question_difficulty=d.question_difficulty.value,
        )
        for d in InterviewDifficulty
    ]
