"""
Candidate profile and resume context models.

Both are supplied by collaborators outside this service (account and
resume parsing); sessions keep a snapshot for question generation and
company recommendations.
"""

from pydantic import BaseModel, Field


class CandidateProfile(BaseModel):
    """Who is being interviewed."""

    owner_id: str
    name: str = ""
    job_title: str = ""
    industry: str = ""
    experience_level: str = ""
    skills: list[str] = Field(default_factory=list)

    def get_owner_id(self) -> str:
        return self.owner_id

    def to_prompt_context(self) -> str:
        """Render the profile for AI prompts."""
        return (
            f"- Name: {self.name or 'Candidate'}\n"
            f"- Current role: {self.job_title or 'Not specified'}\n"
            f"- Industry: {self.industry or 'Not specified'}\n"
            f"- Experience level: {self.experience_level or 'Not specified'}\n"
            f"- Skills: {', '.join(self.skills) or 'Not specified'}"
        )


class ResumeContext(BaseModel):
    """Extracted resume content relevant to an interview."""

    resume_id: str
    owner_id: str
    summary: str = ""
    skills: list[str] = Field(default_factory=list)
    experience: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    target_job_role: str = ""
    target_industry: str = ""

    def get_owner_id(self) -> str:
        return self.owner_id

    def to_prompt_context(self) -> str:
        lines = [f"- Summary: {self.summary or 'Not provided'}"]
        if self.skills:
            lines.append(f"- Skills: {', '.join(self.skills[:20])}")
        if self.experience:
            lines.append(f"- Experience: {'; '.join(self.experience[:5])}")
        if self.education:
            lines.append(f"- Education: {'; '.join(self.education[:3])}")
        if self.target_job_role:
            lines.append(f"- Target role: {self.target_job_role}")
        return "\n".join(lines)
