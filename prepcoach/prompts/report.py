"""
Report Prompt Templates

Prompts used once a session completes.
"""

import json

from prepcoach.models.interview import InterviewSession
from prepcoach.models.profile import CandidateProfile, ResumeContext


class ReportPrompts:
    """Prompt templates for post-interview recommendations."""

    SYSTEM_CONTEXT = """You are an expert career advisor.

Based on a candidate's mock interview performance and background, suggest
companies they should consider applying to.
"""

    def generate_company_recommendations_prompt(
        self,
        profile: CandidateProfile | None,
        session: InterviewSession,
        resume: ResumeContext | None,
    ) -> str:
        performance = session.performance
        overall = performance.overall_score if performance else 0
        categories = performance.category_scores if performance else {}
        strengths = [p for bucket in (performance.strengths if performance else []) for p in bucket.points]
        weaknesses = [p for bucket in (performance.weaknesses if performance else []) for p in bucket.points]

        target_role = (
            (resume.target_job_role if resume else "")
            or (profile.job_title if profile else "")
            or session.job_role
            or "Software Engineer"
        )
        target_industry = (
            (resume.target_industry if resume else "")
            or (profile.industry if profile else "")
            or session.industry
            or "Technology"
        )
        skills = resume.skills if resume else (profile.skills if profile else [])

        return f"""{self.SYSTEM_CONTEXT}
=== CANDIDATE ===
- Target role: {target_role}
- Target industry: {target_industry}
- Overall interview score: {overall}/100
- Category scores: {json.dumps(categories)}
- Key strengths: {', '.join(strengths[:5]) or 'None specified'}
- Areas for improvement: {', '.join(weaknesses[:5]) or 'None specified'}
- Skills: {', '.join(skills[:20]) or 'None specified'}

=== TASK ===
Suggest 8-12 companies that fit this candidate's level, role and strengths.

Respond in JSON only:
{{
    "companies": [
        {{"name": "Company", "reason": "Why it fits", "match_score": 0-100}}
    ]
}}
"""
