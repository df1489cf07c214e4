"""
AI Evaluator Prompt Templates

Contains structured prompts for scoring a candidate's answer.

Two independent judgments are requested per answer:
- Content: relevance, clarity and confidence, with qualitative feedback
- Correctness: the ideal answer, covered and missed key points, mistakes
"""

from prepcoach.models.evaluation import MediaSignals
from prepcoach.models.question import Question


class EvaluatorPrompts:
    """
    Prompt templates for AI evaluation of answers.

    Key principles:
    - Objective, rubric-based scoring on a 0-100 scale
    - Identify both strengths and gaps
    - Provide actionable feedback
    """

    SYSTEM_CONTEXT = """You are an expert interviewer evaluating a candidate's answer in a mock interview.

Your role:
- Score the answer objectively against the rubric
- Identify what the candidate did well
- Note what was missing or incorrect
- Give concrete, actionable suggestions

Be fair but thorough.
"""

    SCORING_RUBRIC = """
=== SCORING RUBRIC (0-100 scale) ===
- 90-100: Complete, accurate, well structured, with relevant examples
- 70-89: Mostly complete and accurate, minor gaps
- 50-69: Partially addresses the question, noticeable gaps
- 30-49: Superficial or partly incorrect
- 0-29: Off-topic, incorrect or empty
"""

    def generate_content_prompt(
        self,
        question: Question,
        answer: str,
        expected_keywords: list[str],
        media: MediaSignals | None = None,
    ) -> str:
        """
        Build the content scoring prompt.

        When media signals are present they are described so the
        narrative can account for delivery as well as content.
        """
        keywords = ", ".join(expected_keywords) if expected_keywords else "None specified"
        media_section = ""
        if media is not None and not media.is_empty:
            media_section = self._format_media(media)

        return f"""{self.SYSTEM_CONTEXT}
{self.SCORING_RUBRIC}
=== QUESTION ===
{question.text}

=== EXPECTED KEYWORDS ===
{keywords}

=== CANDIDATE ANSWER ===
{answer}
{media_section}
=== TASK ===
Score the answer. Respond in JSON only:
{{
    "score": 0-100,
    "relevance": 0-100,
    "clarity": 0-100,
    "confidence": 0-100,
    "feedback": {{
        "strengths": ["..."],
        "weaknesses": ["..."],
        "suggestions": ["..."]
    }},
    "keywords": {{
        "found": ["..."],
        "missing": ["..."]
    }}
}}
"""

    def _format_media(self, media: MediaSignals) -> str:
        lines = ["", "=== DELIVERY SIGNALS ==="]
        if media.video is not None:
            video = media.video
            lines.extend([
                f"- Eye contact: {video.eye_contact.score}/100",
                f"- Facial confidence: {video.facial_expressions.confidence}/100",
                f"- Visible stress: {video.facial_expressions.stress}/100",
                f"- Posture: {video.body_language.posture}/100",
            ])
        if media.audio is not None:
            audio = media.audio
            lines.extend([
                f"- Speech clarity: {audio.speech_clarity}/100",
                f"- Pace: {audio.pace.words_per_minute} WPM ({audio.pace.rating.value})",
                f"- Tone confidence: {audio.tone.confidence}/100",
                f"- Filler words: {audio.filler_words.count}",
            ])
        lines.append("Consider delivery in the feedback narrative, but score content on its merits.")
        return "\n".join(lines) + "\n"

    def generate_correctness_prompt(
        self,
        question: Question,
        answer: str,
        category: str,
        difficulty: str,
        subject: str,
    ) -> str:
        """Build the correctness judgment prompt."""
        return f"""{self.SYSTEM_CONTEXT}
=== QUESTION ===
{question.text}

- Category: {category}
- Subject: {subject}
- Difficulty: {difficulty}

=== CANDIDATE ANSWER ===
{answer}

=== TASK ===
1. Write the ideal answer to the question
2. List the key points a strong answer covers
3. Decide which key points the candidate covered and which they missed
4. List any mistakes or incorrect statements
5. Give a correctness score (0-100) and whether the answer is fundamentally correct
6. Suggest prioritised improvement areas

Respond in JSON only:
{{
    "correct_answer": "...",
    "key_points": ["..."],
    "common_mistakes": ["..."],
    "is_correct": true,
    "correctness_score": 0-100,
    "key_points_covered": ["..."],
    "key_points_missed": ["..."],
    "mistakes_made": ["..."],
    "improvement_areas": [
        {{
            "area": "...",
            "priority": "low | medium | high | critical",
            "suggestion": "...",
            "impact": "..."
        }}
    ]
}}
"""
