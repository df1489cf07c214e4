import json

import httpx
import pytest

from conftest import make_question

from prepcoach.core.ai_reasoning import AIReasoningLayer
from prepcoach.core.exceptions import AIUnavailableError
from prepcoach.models.evaluation import AudioSignal, EvaluationSource, MediaSignals


def _reply(content) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def _layer(handler) -> AIReasoningLayer:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://llm.test")
    return AIReasoningLayer(client=client)


async def test_unconfigured_layer_is_unavailable():
    layer = AIReasoningLayer()
    assert layer.is_available is False
    with pytest.raises(AIUnavailableError):
        await layer.score_content(make_question(), "answer", [])


async def test_score_content_parses_and_clamps():
    body = {
        "score": 140,
        "relevance": 80,
        "feedback": {"strengths": [], "weaknesses": ["Light on detail"], "suggestions": ["Add numbers"]},
        "keywords": {"found": ["hash"], "missing": []},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return _reply("Here you go:\n```json\n" + json.dumps(body) + "\n```")

    content = await _layer(handler).score_content(make_question(), "A hash maps keys.", ["hash"])

    assert content.score == 100
    assert content.relevance == 80
    assert content.clarity == 100
    assert content.source == EvaluationSource.AI
    assert content.feedback.strengths == ["Provided a response"]
    assert content.feedback.weaknesses == ["Light on detail"]
    assert content.keywords.found == ["hash"]


async def test_score_content_without_numeric_score_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply('{"score": "great"}')

    with pytest.raises(AIUnavailableError):
        await _layer(handler).score_content(make_question(), "answer", [])


async def test_keywords_matched_locally_when_model_omits_them():
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply('{"score": 70}')

    content = await _layer(handler).score_content(make_question(), "Chaining handles it", ["chaining", "probing"])
    assert content.keywords.found == ["chaining"]
    assert content.keywords.missing == ["probing"]


async def test_multimodal_attempt_falls_back_to_text_only_prompt():
    prompts = []

    def handler(request: httpx.Request) -> httpx.Response:
        prompts.append(json.loads(request.content)["messages"][0]["content"])
        if len(prompts) == 1:
            return httpx.Response(500, json={"error": "overloaded"})
        return _reply('{"score": 66}')

    media = MediaSignals(audio=AudioSignal(overall=70))
    content = await _layer(handler).score_content(make_question(), "answer text", [], media=media)

    assert content.score == 66
    assert len(prompts) == 2
    assert prompts[0] != prompts[1]


async def test_gateway_error_propagates():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502)

    with pytest.raises(httpx.HTTPError):
        await _layer(handler).evaluate_correctness(make_question(), "answer", "technical", "medium", "dsa")


async def test_evaluate_correctness_parses_fields():
    body = {
        "correct_answer": "Chaining or open addressing.",
        "key_points": ["Hash function", "Collision strategy"],
        "common_mistakes": ["Ignoring load factor"],
        "correctness_score": 45,
        "key_points_covered": ["Hash function"],
        "key_points_missed": ["Collision strategy"],
        "improvement_areas": [
            {"area": "Depth", "priority": "critical", "suggestion": "Explain probing", "impact": "High"},
            {"area": "Bad", "priority": "someday"},
            {"priority": "low"},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return _reply(json.dumps(body))

    result = await _layer(handler).evaluate_correctness(make_question(), "answer", "technical", "medium", "dsa")

    assert result.correctness_score == 45
    assert result.is_correct is False
    assert result.correct_answer == "Chaining or open addressing."
    assert [area.area for area in result.improvement_areas] == ["Depth"]
    assert result.to_enrichment("q1").key_points == ["Hash function", "Collision strategy"]


async def test_generate_questions_accepts_array_and_object():
    replies = iter([
        '[{"text": "Q one"}, "Q two", {"question": "Q three"}, {"text": ""}]',
        '{"questions": []}',
    ])

    def handler(request: httpx.Request) -> httpx.Response:
        return _reply(next(replies))

    layer = _layer(handler)
    questions = await layer.generate_questions(None, None, "technical", "python", "beginner", 3, [])
    assert [q["text"] for q in questions] == ["Q one", "Q two", "Q three"]

    with pytest.raises(AIUnavailableError):
        await layer.generate_questions(None, None, "technical", "python", "beginner", 3, [])


async def test_content_list_responses_are_joined():
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply([{"type": "text", "text": '{"score": '}, "55}"])

    content = await _layer(handler).score_content(make_question(), "answer", [])
    assert content.score == 55


async def test_non_finite_sub_scores_fall_back_to_overall_score():
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply('{"score": 72, "relevance": NaN, "clarity": Infinity}')

    content = await _layer(handler).score_content(make_question(), "answer", [])

    assert content.score == 72
    assert content.relevance == 72
    assert content.clarity == 72


async def test_non_finite_overall_score_is_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return _reply('{"score": NaN}')

    with pytest.raises(AIUnavailableError):
        await _layer(handler).score_content(make_question(), "answer", [])


class RecordingSpan:
    def __init__(self, name: str):
        self.name = name
        self.output = None
        self.ended = False

    def update(self, output=None, **kwargs):
        self.output = output

    def end(self):
        self.ended = True


class RecordingLangfuse:
    def __init__(self):
        self.spans: list[RecordingSpan] = []

    def start_span(self, name: str, metadata=None):
        span = RecordingSpan(name)
        self.spans.append(span)
        return span


async def test_unparseable_gateway_body_closes_span():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>bad gateway</html>")

    layer = _layer(handler)
    layer.langfuse = RecordingLangfuse()

    with pytest.raises(AIUnavailableError):
        await layer.score_content(make_question(), "answer", [])

    assert len(layer.langfuse.spans) == 1
    assert layer.langfuse.spans[0].ended is True
    assert "error" in layer.langfuse.spans[0].output
