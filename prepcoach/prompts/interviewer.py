"""
AI Interviewer Prompt Templates

Prompts for generating a personalised batch of interview questions.
"""

from prepcoach.models.profile import CandidateProfile, ResumeContext


class InterviewerPrompts:
    """
    Prompt templates for question generation.

    Key principles:
    - Questions tailored to the candidate's role and resume
    - Never repeat previously asked questions
    - Strict JSON output
    """

    SYSTEM_CONTEXT = """You are an expert interview coach running a realistic mock interview.

Your role:
- Ask questions a real interviewer for this role would ask
- Match the requested difficulty
- Tailor questions to the candidate's background when it is known
- Never repeat or closely paraphrase questions the candidate has already seen
"""

    TYPE_GUIDANCE = {
        "technical": "Focus on concepts, problem solving and hands-on implementation details.",
        "behavioral": "Use situational questions answerable with the STAR method.",
        "case": "Pose business or product scenarios that require structured reasoning.",
        "system-design": "Ask candidates to design or scale real systems and discuss trade-offs.",
        "general": "Cover motivation, background and career goals.",
        "mixed": "Blend technical, behavioral and situational questions.",
    }

    def generate_questions_prompt(
        self,
        profile: CandidateProfile | None,
        resume: ResumeContext | None,
        interview_type: str,
        subject: str,
        difficulty: str,
        count: int,
        previously_asked: list[str],
    ) -> str:
        """Build the prompt for a batch of questions."""
        profile_section = profile.to_prompt_context() if profile else "- No profile available"
        resume_section = resume.to_prompt_context() if resume else "- No resume available"

        previous_section = ""
        if previously_asked:
            numbered = "\n".join(f"{i + 1}. {q}" for i, q in enumerate(previously_asked))
            previous_section = (
                "\n=== PREVIOUSLY ASKED QUESTIONS (DO NOT REPEAT OR CLOSELY REPLICATE) ===\n"
                f"{numbered}\n"
            )

        return f"""{self.SYSTEM_CONTEXT}

=== CANDIDATE PROFILE ===
{profile_section}

=== RESUME ===
{resume_section}

=== INTERVIEW ===
- Type: {interview_type}
- Subject: {subject}
- Difficulty: {difficulty}
- Guidance: {self.TYPE_GUIDANCE.get(interview_type, self.TYPE_GUIDANCE["general"])}
{previous_section}
=== TASK ===
Generate exactly {count} unique interview questions.

Respond in JSON only:
{{
    "questions": [
        {{
            "text": "The question",
            "category": "technical | behavioral | case | system-design | general",
            "difficulty": "easy | medium | hard",
            "expected_keywords": ["keyword1", "keyword2"],
            "time_limit": 120
        }}
    ]
}}
"""
