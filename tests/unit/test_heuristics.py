from conftest import make_question

from prepcoach.core.heuristics import (
    HEURISTIC_CEILING,
    HEURISTIC_FLOOR,
    evaluate_correctness_heuristically,
    match_keywords,
    score_content_heuristically,
    score_media_only,
)
from prepcoach.models.evaluation import (
    AudioSignal,
    EvaluationSource,
    EyeContact,
    FillerWords,
    MediaSignals,
    PaceRating,
    SpeechPace,
    VideoSignal,
    VocalTone,
)
from prepcoach.models.question import QuestionCategory

SHORT_ANSWER = "I would use a hash map for it"

STRUCTURED_ANSWER = (
    "First, a hash table stores data in an array of buckets. For example, Python dicts "
    "do this. Additionally, each key is hashed to pick a bucket, and collisions are handled "
    "by chaining or open addressing so lookups stay fast on average in the system."
)

# 81 characters, 24 words, one structure marker, no examples
MIDDLING_ANSWER = "First we go to it and we do it as we can so we see how it is and we fix it now ok"


def test_match_keywords_is_case_insensitive():
    match = match_keywords("Uses CHAINING and buckets", ["chaining", "bucket", "load factor"])
    assert match.found == ["chaining", "bucket"]
    assert match.missing == ["load factor"]


def test_short_answer_scores_low_but_in_range():
    content = score_content_heuristically(SHORT_ANSWER, make_question())
    assert 30 <= content.score <= 60
    assert content.source == EvaluationSource.HEURISTIC
    assert "Answer could be more detailed and comprehensive" in content.feedback.weaknesses


def test_long_structured_answer_scores_high_but_capped():
    content = score_content_heuristically(STRUCTURED_ANSWER, make_question())
    assert 65 <= content.score <= 75
    assert content.clarity == 80
    assert "Well-structured answer with clear organization" in content.feedback.strengths
    assert "Included examples to illustrate points" in content.feedback.strengths


def test_heuristic_scores_stay_within_floor_and_ceiling():
    for text in ["x", SHORT_ANSWER, MIDDLING_ANSWER, STRUCTURED_ANSWER * 5]:
        content = score_content_heuristically(text, make_question())
        assert HEURISTIC_FLOOR <= content.score <= HEURISTIC_CEILING


def test_heuristic_is_deterministic():
    question = make_question(keywords=["bucket"])
    first = score_content_heuristically(STRUCTURED_ANSWER, question)
    second = score_content_heuristically(STRUCTURED_ANSWER, question)
    assert first == second


def test_missing_keywords_are_suggested():
    question = make_question(keywords=["load factor", "rehashing", "bucket"])
    content = score_content_heuristically(SHORT_ANSWER, question)
    assert content.keywords.missing == ["load factor", "rehashing", "bucket"]
    assert "Make sure to discuss: load factor, rehashing, bucket" in content.feedback.suggestions


def test_correctness_with_keywords_passes_at_half():
    question = make_question(keywords=["hash", "collision", "load factor", "rehashing"])
    result = evaluate_correctness_heuristically(
        "Each key gets a hash and a collision is resolved by chaining.", question, "dsa"
    )
    assert result.correctness_score == 50
    assert result.is_correct is True
    assert result.key_points_covered == ["Mentioned: hash", "Mentioned: collision"]
    assert result.key_points_missed == ["Should discuss: load factor", "Should discuss: rehashing"]
    assert result.key_points[0] == "Algorithmic approach and logic"
    assert result.correct_answer is None


def test_correctness_without_keywords_needs_sixty():
    question = make_question(category=QuestionCategory.BEHAVIORAL)
    result = evaluate_correctness_heuristically(MIDDLING_ANSWER, question)
    assert result.correctness_score == 55
    assert result.is_correct is False
    assert result.key_points_covered == ["Provided a response"]


def test_correctness_flags_very_short_answers():
    result = evaluate_correctness_heuristically("Not sure.", make_question())
    assert result.mistakes_made == ["Answer is too brief for thorough evaluation"]
    areas = {area.area: area.priority.value for area in result.improvement_areas}
    assert areas["Content Depth"] == "high"
    assert "Answer Structure" in areas
    assert "Examples and Evidence" in areas


def test_media_only_averages_available_signals():
    signals = MediaSignals(
        video=VideoSignal(overall=80, eye_contact=EyeContact(score=75)),
        audio=AudioSignal(overall=60, tone=VocalTone(confidence=72), speech_clarity=68),
    )
    content = score_media_only(signals, make_question(keywords=["hash"]))
    assert content.score == 70
    assert content.confidence == 72
    assert content.clarity == 68
    assert content.relevance == 55
    assert content.source == EvaluationSource.MEDIA_ONLY
    assert content.keywords.missing == ["hash"]
    assert "Good eye contact" in content.feedback.strengths
    assert "Confident tone" in content.feedback.strengths


def test_media_only_single_signal_and_feedback_rules():
    signals = MediaSignals(audio=AudioSignal(
        overall=64,
        pace=SpeechPace(words_per_minute=200, rating=PaceRating.TOO_FAST, score=65),
        filler_words=FillerWords(count=9),
    ))
    content = score_media_only(signals, make_question())
    assert content.score == 64
    assert content.feedback.strengths[0] == "Provided audio response"
    assert "Excessive filler words detected" in content.feedback.weaknesses
    assert "Slow down speech pace" in content.feedback.suggestions
    # Zero tone confidence falls back to neutral
    assert content.confidence == 50


def test_media_only_without_signals_uses_default():
    content = score_media_only(MediaSignals(), make_question())
    assert content.score == 55
