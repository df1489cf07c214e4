"""
Company recommendations for completed sessions.

Asks the model for companies that fit the candidate. When the model is
unavailable a default list is chosen by industry and score tier.
"""

import logging
from typing import Any

from prepcoach.models.interview import InterviewSession
from prepcoach.models.performance import CompanyRecommendation
from prepcoach.models.profile import CandidateProfile, ResumeContext

logger = logging.getLogger(__name__)

# industry -> (score >= 80, score >= 60, below 60)
DEFAULT_COMPANIES: dict[str, tuple[list[tuple[str, str]], ...]] = {
    "technology": (
        [
            ("Google", "Strong performance suits a demanding engineering culture"),
            ("Microsoft", "Broad range of senior engineering roles"),
            ("Amazon", "Large-scale systems and ownership culture"),
            ("Stripe", "High engineering bar with product focus"),
        ],
        [
            ("Atlassian", "Collaborative teams with solid mentoring"),
            ("Shopify", "Good growth path for developing engineers"),
            ("Salesforce", "Structured career ladders"),
            ("Adobe", "Wide variety of product teams"),
        ],
        [
            ("Accenture", "Training programs for early-career candidates"),
            ("Infosys", "Structured onboarding and learning tracks"),
            ("Cognizant", "Entry routes across many technologies"),
            ("IBM", "Apprenticeship and associate programs"),
        ],
    ),
    "finance": (
        [
            ("Goldman Sachs", "Engineering roles with high technical expectations"),
            ("JPMorgan Chase", "Large technology organisation in finance"),
            ("Jane Street", "Rigorous problem solving culture"),
        ],
        [
            ("Capital One", "Technology-led bank with strong engineering practice"),
            ("Morgan Stanley", "Stable teams with growth opportunities"),
            ("American Express", "Broad product engineering"),
        ],
        [
            ("Wells Fargo", "Rotational programs for new technologists"),
            ("Fidelity Investments", "Early-career development programs"),
            ("Charles Schwab", "Supportive entry-level teams"),
        ],
    ),
    "healthcare": (
        [
            ("Epic Systems", "Complex healthcare software at scale"),
            ("Illumina", "Data-heavy genomics engineering"),
            ("Medtronic", "Regulated product engineering"),
        ],
        [
            ("Cerner", "Large clinical software organisation"),
            ("Philips Healthcare", "Mix of devices and software"),
            ("UnitedHealth Group", "Wide range of technology roles"),
        ],
        [
            ("CVS Health", "Entry-level technology programs"),
            ("McKesson", "Structured onboarding"),
            ("Cardinal Health", "Development programs for new graduates"),
        ],
    ),
}

DEFAULT_INDUSTRY = "technology"


class CompanyRecommender:
    """Best-effort company recommendations."""

    def __init__(self, ai_reasoning: Any = None):  # AIReasoningLayer
        self.ai_reasoning = ai_reasoning

    async def recommend(
        self,
        profile: CandidateProfile | None,
        session: InterviewSession,
        resume: ResumeContext | None = None,
    ) -> list[CompanyRecommendation]:
        """
        Recommend companies for a completed session.

        Args:
            profile: Candidate profile
            session: Completed session with performance populated
            resume: Optional resume context

        Returns:
            Recommendations from the model, or the default list
        """
        if self.ai_reasoning is not None:
            try:
                return await self.ai_reasoning.recommend_companies(
                    profile=profile,
                    session=session,
                    resume=resume,
                )
            except Exception as e:
                logger.warning(f"Company recommendations failed, using defaults: {e}")

        return default_companies(
            industry=(profile.industry if profile else "") or session.industry,
            overall_score=session.performance.overall_score if session.performance else 0,
        )


def default_companies(industry: str, overall_score: int) -> list[CompanyRecommendation]:
    tiers = DEFAULT_COMPANIES.get((industry or "").strip().lower(), DEFAULT_COMPANIES[DEFAULT_INDUSTRY])

    if overall_score >= 80:
        tier, match = tiers[0], 90
    elif overall_score >= 60:
        tier, match = tiers[1], 80
    else:
        tier, match = tiers[2], 70

    return [
        CompanyRecommendation(name=name, reason=reason, match_score=match - index * 2)
        for index, (name, reason) in enumerate(tier)
    ]
