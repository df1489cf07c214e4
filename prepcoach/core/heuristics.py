"""
Deterministic scoring heuristics.

Used by the evaluation engine whenever the generative model is
unavailable or returns unusable output. Every function here is pure:
the same answer always produces the same scores and feedback.
"""

import re
from typing import Any

from prepcoach.models.evaluation import (
    ContentScore,
    CorrectnessResult,
    EvaluationFeedback,
    EvaluationSource,
    ImprovementArea,
    ImprovementPriority,
    KeywordMatch,
    MediaSignals,
    PaceRating,
)
from prepcoach.models.question import Question, QuestionCategory

# Heuristic scores never claim better than "probably mediocre"
HEURISTIC_FLOOR = 30
HEURISTIC_CEILING = 75
HEURISTIC_BASE = 50

MEDIA_ONLY_DEFAULT_SCORE = 55
MEDIA_ONLY_RELEVANCE = 55
NEUTRAL_SCORE = 50

STRUCTURE_PATTERN = re.compile(
    r"(\d+\.|\n-|\n\*|First|Second|Additionally|Furthermore)", re.IGNORECASE
)
EXAMPLE_PATTERN = re.compile(r"example|instance|such as|for example|like", re.IGNORECASE)
TECHNICAL_PATTERN = re.compile(
    r"\b(function|class|method|algorithm|data|process|system|design)\b", re.IGNORECASE
)

SUBJECT_KEY_POINTS: dict[str, list[str]] = {
    "dsa": [
        "Algorithmic approach and logic",
        "Time and space complexity analysis",
        "Edge case handling",
        "Code implementation details",
    ],
    "java": [
        "Java-specific syntax and features",
        "Object-oriented programming concepts",
        "Exception handling",
        "Collections framework usage",
    ],
    "python": [
        "Python-specific syntax and features",
        "Data structures and libraries",
        "Error handling",
        "Pythonic coding practices",
    ],
    "javascript": [
        "JavaScript-specific syntax and features",
        "Asynchronous programming concepts",
        "DOM manipulation",
        "Modern ES6+ features",
    ],
    "system-design": [
        "Scalability considerations",
        "System architecture",
        "Database design",
        "API design",
    ],
}

DEFAULT_KEY_POINTS = [
    "Clear explanation of the concept",
    "Practical examples or use cases",
    "Comparison or contrast with related concepts",
    "Relevance to the question",
]


# ============================================================================
# TEXT ANALYSIS
# ============================================================================

def match_keywords(text: str, keywords: list[str]) -> KeywordMatch:
    """Case-insensitive substring match of expected keywords."""
    lowered = text.lower()
    found = [kw for kw in keywords if kw.lower() in lowered]
    missing = [kw for kw in keywords if kw not in found]
    return KeywordMatch(found=found, missing=missing)


def analyze_answer_text(text: str, question: Question) -> dict[str, Any]:
    """Collect the text signals the heuristic scorer works from."""
    keywords = match_keywords(text, question.expected_keywords)
    return {
        "length": len(text),
        "word_count": len(text.split()),
        "has_structure": bool(STRUCTURE_PATTERN.search(text)),
        "has_examples": bool(EXAMPLE_PATTERN.search(text)),
        "has_technical": bool(TECHNICAL_PATTERN.search(text)),
        "is_technical_question": question.category == QuestionCategory.TECHNICAL,
        "keywords": keywords,
        "keyword_total": len(question.expected_keywords),
    }


def heuristic_score(analysis: dict[str, Any]) -> int:
    """Score in [30, 75] from length, word count and marker checks."""
    score = HEURISTIC_BASE

    length = analysis["length"]
    if length > 200:
        score += 15
    elif length > 100:
        score += 10
    elif length < 50:
        score -= 15

    word_count = analysis["word_count"]
    if word_count > 50:
        score += 5
    elif word_count < 20:
        score -= 10

    if analysis["has_structure"]:
        score += 5
    if analysis["has_examples"]:
        score += 5
    if analysis["has_technical"] and analysis["is_technical_question"]:
        score += 5

    return max(HEURISTIC_FLOOR, min(HEURISTIC_CEILING, score))


# ============================================================================
# CONTENT FALLBACK
# ============================================================================

def score_content_heuristically(text: str, question: Question) -> ContentScore:
    """
    Heuristic stand-in for AI content scoring.

    Args:
        text: Answer text (typed or transcribed)
        question: The question being answered

    Returns:
        ContentScore with feedback synthesised from the checks that fired
    """
    analysis = analyze_answer_text(text, question)
    score = heuristic_score(analysis)
    clarity = min(score + 10, 80) if analysis["has_structure"] else score

    return ContentScore(
        score=score,
        confidence=score,
        relevance=score,
        clarity=clarity,
        feedback=_heuristic_feedback(analysis, question),
        keywords=analysis["keywords"],
        source=EvaluationSource.HEURISTIC,
    )


def _heuristic_feedback(analysis: dict[str, Any], question: Question) -> EvaluationFeedback:
    length = analysis["length"]
    word_count = analysis["word_count"]
    found = analysis["keywords"].found
    missing = analysis["keywords"].missing

    strengths = []
    if length > 20:
        strengths.append("Provided a substantive answer")
    if length > 100:
        strengths.append("Detailed response with good length")
    if analysis["has_structure"]:
        strengths.append("Well-structured answer with clear organization")
    if analysis["has_examples"]:
        strengths.append("Included examples to illustrate points")
    if found:
        strengths.append(f"Covered {len(found)} key concept(s)")
    if analysis["has_technical"]:
        strengths.append("Used appropriate technical terminology")
    if not strengths:
        strengths.append("Attempted to address the question")

    weaknesses = []
    if length < 50:
        weaknesses.append("Answer could be more detailed and comprehensive")
    if length < 100 and not analysis["has_structure"]:
        weaknesses.append("Consider organizing your answer with clear points")
    if not analysis["has_examples"]:
        weaknesses.append("Add concrete examples to strengthen your answer")
    if len(found) < analysis["keyword_total"] / 2:
        weaknesses.append("Missing some key concepts that should be addressed")
    if word_count < 30:
        weaknesses.append("Expand your explanation with more depth")
    if not weaknesses:
        weaknesses.append("Consider adding more specific details and examples")

    suggestions = []
    if length < 100:
        suggestions.append("Expand your answer to 100-200 words for better coverage")
    if not analysis["has_structure"]:
        suggestions.append("Use numbered points or clear paragraphs to organize your thoughts")
    if not analysis["has_examples"]:
        suggestions.append("Include specific examples or use cases to demonstrate understanding")
    if missing:
        suggestions.append(f"Make sure to discuss: {', '.join(missing[:3])}")
    if analysis["is_technical_question"] and not analysis["has_technical"]:
        suggestions.append("Include technical terminology and concepts relevant to the question")
    if not suggestions:
        suggestions.append("Review the question carefully and ensure all aspects are covered")

    return EvaluationFeedback(
        strengths=strengths,
        weaknesses=weaknesses,
        suggestions=suggestions,
    )


# ============================================================================
# CORRECTNESS FALLBACK
# ============================================================================

def evaluate_correctness_heuristically(
    text: str,
    question: Question,
    subject: str | None = None,
) -> CorrectnessResult:
    """
    Keyword-overlap stand-in for AI correctness evaluation.

    With expected keywords the score is the matched share and the answer
    counts as correct from 50. Without keywords the content heuristic
    score is reused and the bar is 60. The two thresholds differ on
    purpose and must stay that way.
    """
    analysis = analyze_answer_text(text, question)
    keywords = analysis["keywords"]
    expected = question.expected_keywords

    if expected:
        correctness_score = round(len(keywords.found) / len(expected) * 100)
        is_correct = correctness_score >= 50
    else:
        correctness_score = heuristic_score(analysis)
        is_correct = correctness_score >= 60

    covered = [f"Mentioned: {kw}" for kw in keywords.found] or ["Provided a response"]
    missed = [f"Should discuss: {kw}" for kw in keywords.missing]
    mistakes = ["Answer is too brief for thorough evaluation"] if analysis["length"] < 20 else []

    return CorrectnessResult(
        key_points=SUBJECT_KEY_POINTS.get(subject or "", DEFAULT_KEY_POINTS),
        is_correct=is_correct,
        correctness_score=correctness_score,
        key_points_covered=covered,
        key_points_missed=missed,
        mistakes_made=mistakes,
        improvement_areas=_heuristic_improvement_areas(analysis),
    )


def _heuristic_improvement_areas(analysis: dict[str, Any]) -> list[ImprovementArea]:
    length = analysis["length"]
    missing = analysis["keywords"].missing

    if length < 50:
        depth_priority = ImprovementPriority.HIGH
    elif length < 100:
        depth_priority = ImprovementPriority.MEDIUM
    else:
        depth_priority = ImprovementPriority.LOW

    areas = [
        ImprovementArea(
            area="Content Depth",
            priority=depth_priority,
            suggestion=(
                "Significantly expand your answer with more details and examples"
                if length < 50
                else "Add more depth to demonstrate comprehensive understanding"
            ),
            impact="Shows thorough knowledge and preparation",
        )
    ]

    if missing:
        areas.append(ImprovementArea(
            area="Key Concepts Coverage",
            priority=ImprovementPriority.HIGH,
            suggestion=f"Ensure you address these concepts: {', '.join(missing[:3])}",
            impact="Demonstrates complete understanding of the topic",
        ))

    if not analysis["has_structure"]:
        areas.append(ImprovementArea(
            area="Answer Structure",
            priority=ImprovementPriority.MEDIUM,
            suggestion="Organize your answer with numbered points or clear paragraphs",
            impact="Makes your answer clearer and more professional",
        ))

    if not analysis["has_examples"]:
        areas.append(ImprovementArea(
            area="Examples and Evidence",
            priority=ImprovementPriority.MEDIUM,
            suggestion="Include specific examples or real-world applications",
            impact="Strengthens your argument and shows practical understanding",
        ))

    return areas


# ============================================================================
# MEDIA-ONLY PATH
# ============================================================================

def score_media_only(signals: MediaSignals, question: Question) -> ContentScore:
    """
    Score an answer that has media but no usable text.

    The base score is the mean of the available signal overalls,
    or 55 when no signal block exists.
    """
    overalls = signals.overall_scores()
    base = round(sum(overalls) / len(overalls)) if overalls else MEDIA_ONLY_DEFAULT_SCORE

    video = signals.video
    audio = signals.audio

    strengths = ["Provided video response" if video is not None else "Provided audio response"]
    weaknesses = ["Transcript unavailable for detailed content analysis"]
    suggestions = ["Consider providing a brief text summary to enable comprehensive analysis"]

    if video is not None:
        if video.eye_contact.score > 70:
            strengths.append("Good eye contact")
        if video.facial_expressions.stress > 70:
            weaknesses.append("Visible stress indicators")
        if video.eye_contact.score < 60:
            suggestions.append("Improve eye contact with camera")

    if audio is not None:
        if audio.tone.confidence > 70:
            strengths.append("Confident tone")
        if audio.filler_words.count > 8:
            weaknesses.append("Excessive filler words detected")
        if audio.pace.rating == PaceRating.TOO_FAST:
            suggestions.append("Slow down speech pace")
        elif audio.pace.rating == PaceRating.TOO_SLOW:
            suggestions.append("Increase speech pace slightly")

    return ContentScore(
        score=base,
        confidence=audio.tone.confidence if audio and audio.tone.confidence else NEUTRAL_SCORE,
        relevance=MEDIA_ONLY_RELEVANCE,
        clarity=audio.speech_clarity if audio and audio.speech_clarity else NEUTRAL_SCORE,
        feedback=EvaluationFeedback(
            strengths=strengths,
            weaknesses=weaknesses,
            suggestions=suggestions,
        ),
        keywords=KeywordMatch(missing=list(question.expected_keywords)),
        source=EvaluationSource.MEDIA_ONLY,
    )
