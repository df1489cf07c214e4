from conftest import FakeAI, FakeTranscriber, content_score, make_question

from prepcoach.core.evaluation_engine import EvaluationEngine
from prepcoach.core.media_analyzer import MediaAnalyzer
from prepcoach.core.score_combiner import combine_scores
from prepcoach.models.evaluation import CorrectnessResult, EvaluationSource
from prepcoach.models.interview import AnswerSubmission

ANSWER = "A hash table maps keys to buckets and resolves a collision by chaining entries."


def _correctness(score: int = 80, correct_answer: str | None = "Use chaining or open addressing.") -> CorrectnessResult:
    return CorrectnessResult(
        correct_answer=correct_answer,
        key_points=["Hashing", "Collision handling"],
        is_correct=score >= 50,
        correctness_score=score,
    )


class ExplodingAnalyzer:
    async def analyze_video(self, ref, duration_seconds=0):
        raise RuntimeError("analyzer crashed")

    async def analyze_audio(self, ref, transcript=None, duration_seconds=0):
        raise RuntimeError("analyzer crashed")


async def test_text_answer_scored_by_model():
    ai = FakeAI(content=content_score(82), correctness=_correctness())
    engine = EvaluationEngine(ai_reasoning=ai, media_analyzer=MediaAnalyzer(seed=1))

    outcome = await engine.evaluate_answer(make_question(), AnswerSubmission(question_id="q1", text=f"  {ANSWER}  "))

    assert outcome.answer_text == ANSWER
    assert outcome.evaluation.score == 82
    assert outcome.evaluation.content_source == EvaluationSource.AI
    assert outcome.evaluation.multimodal_score is None
    assert outcome.evaluation.video_analysis is None
    assert outcome.evaluation.audio_analysis is None
    assert outcome.evaluation.correctness.correctness_score == 80
    assert outcome.enrichment.correct_answer == "Use chaining or open addressing."
    assert outcome.enrichment.question_id == "q1"


async def test_model_failure_falls_back_to_heuristics():
    ai = FakeAI(fail=("score_content", "evaluate_correctness"))
    engine = EvaluationEngine(ai_reasoning=ai)
    question = make_question(keywords=["hash", "collision", "load factor"])

    outcome = await engine.evaluate_answer(question, AnswerSubmission(question_id="q1", text=ANSWER))

    evaluation = outcome.evaluation
    assert evaluation.content_source == EvaluationSource.HEURISTIC
    assert 30 <= evaluation.score <= 75
    assert evaluation.correctness.correctness_score == 67
    assert evaluation.correctness.is_correct is True
    assert evaluation.keywords.missing == ["load factor"]
    assert outcome.enrichment is None


async def test_no_ai_layer_uses_heuristics():
    outcome = await EvaluationEngine().evaluate_answer(
        make_question(), AnswerSubmission(question_id="q1", text=ANSWER)
    )
    assert outcome.evaluation.content_source == EvaluationSource.HEURISTIC
    assert outcome.evaluation.improvement_areas


async def test_video_answer_combines_all_signals():
    analyzer = MediaAnalyzer(seed=1)
    ai = FakeAI(content=content_score(80), correctness=_correctness())
    engine = EvaluationEngine(ai_reasoning=ai, media_analyzer=analyzer)
    submission = AnswerSubmission(question_id="q1", text=ANSWER, video_url="v1.webm", time_spent=60)

    evaluation = (await engine.evaluate_answer(make_question(), submission)).evaluation

    video = evaluation.video_analysis
    audio = evaluation.audio_analysis
    assert video is not None and audio is not None
    assert evaluation.score == combine_scores(80, video.overall, audio.overall)
    assert evaluation.multimodal_score == evaluation.score

    # The multimodal prompt saw the signals
    media_seen = [kwargs["media"] for name, kwargs in ai.calls if name == "score_content"]
    assert media_seen[0] is not None


async def test_audio_only_without_transcription_is_media_only():
    engine = EvaluationEngine(ai_reasoning=FakeAI(content=content_score(90)), media_analyzer=MediaAnalyzer(seed=1))
    submission = AnswerSubmission(question_id="q1", audio_url="a1.mp3", time_spent=45)

    outcome = await engine.evaluate_answer(make_question(keywords=["hash"]), submission)

    evaluation = outcome.evaluation
    assert outcome.answer_text == "[Audio Recording]"
    assert evaluation.content_source == EvaluationSource.MEDIA_ONLY
    assert evaluation.correctness is None
    assert evaluation.video_analysis is None
    # Media-only base is the audio overall, and combining with itself is a no-op
    assert evaluation.score == evaluation.audio_analysis.overall
    assert evaluation.keywords.missing == ["hash"]


async def test_video_only_placeholder_text():
    engine = EvaluationEngine(media_analyzer=MediaAnalyzer(seed=1))
    outcome = await engine.evaluate_answer(
        make_question(), AnswerSubmission(question_id="q1", video_url="v2.webm")
    )
    assert outcome.answer_text == "[Video Recording]"
    assert outcome.evaluation.content_source == EvaluationSource.MEDIA_ONLY


async def test_transcript_is_scored_as_content():
    transcriber = FakeTranscriber(transcript=ANSWER)
    ai = FakeAI(content=content_score(70), correctness=_correctness(60, correct_answer=None))
    engine = EvaluationEngine(ai_reasoning=ai, media_analyzer=MediaAnalyzer(seed=1), audio_processor=transcriber)

    outcome = await engine.evaluate_answer(make_question(), AnswerSubmission(question_id="q1", audio_url="a2.mp3"))

    assert transcriber.refs == ["a2.mp3"]
    assert outcome.transcript == ANSWER
    assert outcome.answer_text == ANSWER
    assert outcome.evaluation.transcript == ANSWER
    assert outcome.evaluation.content_source == EvaluationSource.AI
    assert outcome.enrichment is None


async def test_typed_text_skips_transcription():
    transcriber = FakeTranscriber(transcript="should not be used")
    engine = EvaluationEngine(media_analyzer=MediaAnalyzer(seed=1), audio_processor=transcriber)

    await engine.evaluate_answer(
        make_question(), AnswerSubmission(question_id="q1", text=ANSWER, audio_url="a3.mp3")
    )
    assert transcriber.refs == []


async def test_transcription_failure_degrades_to_media_only():
    transcriber = FakeTranscriber(error=RuntimeError("whisper down"))
    engine = EvaluationEngine(media_analyzer=MediaAnalyzer(seed=1), audio_processor=transcriber)

    outcome = await engine.evaluate_answer(make_question(), AnswerSubmission(question_id="q1", audio_url="a4.mp3"))

    assert outcome.transcript is None
    assert outcome.evaluation.content_source == EvaluationSource.MEDIA_ONLY


async def test_crashing_media_analyzer_leaves_signals_empty():
    engine = EvaluationEngine(media_analyzer=ExplodingAnalyzer())

    outcome = await engine.evaluate_answer(
        make_question(), AnswerSubmission(question_id="q1", video_url="v3.webm")
    )

    evaluation = outcome.evaluation
    assert evaluation.video_analysis is None
    assert evaluation.audio_analysis is None
    assert evaluation.score == 55
    assert evaluation.multimodal_score is None


async def test_all_scores_bounded():
    ai = FakeAI(content=content_score(100), correctness=_correctness(100))
    engine = EvaluationEngine(ai_reasoning=ai, media_analyzer=MediaAnalyzer(seed=9))
    evaluation = (await engine.evaluate_answer(
        make_question(), AnswerSubmission(question_id="q1", text=ANSWER, video_url="v4.webm")
    )).evaluation

    for value in (evaluation.score, evaluation.confidence, evaluation.relevance, evaluation.clarity):
        assert 0 <= value <= 100
