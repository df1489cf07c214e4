from conftest import FakeAI

from prepcoach.core.company_recommender import CompanyRecommender, default_companies
from prepcoach.models.interview import InterviewSession
from prepcoach.models.performance import CompanyRecommendation, Performance
from prepcoach.models.profile import CandidateProfile


def _completed(score: int, industry: str = "") -> InterviewSession:
    return InterviewSession(owner_id="u1", industry=industry, performance=Performance(overall_score=score))


def test_default_tiers_by_score():
    top = default_companies("technology", 85)
    middle = default_companies("Technology", 65)
    low = default_companies("technology", 20)

    assert top[0].name == "Google"
    assert [c.match_score for c in top] == [90, 88, 86, 84]
    assert middle[0].name == "Atlassian"
    assert middle[0].match_score == 80
    assert low[0].match_score == 70


def test_unknown_industry_uses_technology():
    assert default_companies("agriculture", 90)[0].name == "Google"
    assert default_companies("finance", 90)[0].name == "Goldman Sachs"


async def test_model_recommendations_preferred():
    ai = FakeAI(companies=[CompanyRecommendation(name="Acme", reason="fit", match_score=77)])
    result = await CompanyRecommender(ai).recommend(None, _completed(70))
    assert [c.name for c in result] == ["Acme"]


async def test_model_failure_falls_back_to_profile_industry():
    ai = FakeAI(fail=("recommend_companies",))
    profile = CandidateProfile(owner_id="u1", industry="healthcare")

    result = await CompanyRecommender(ai).recommend(profile, _completed(61, industry="finance"))

    assert result[0].name == "Cerner"


async def test_session_industry_used_without_profile():
    result = await CompanyRecommender().recommend(None, _completed(40, industry="finance"))
    assert result[0].name == "Wells Fargo"
