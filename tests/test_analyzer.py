"""Tests for the LLM-backed analyzer and its fallback policy."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ielts_feedback.analyzer import EssayAnalyzer, extract_json_object, gather_all
from ielts_feedback.errors import EssayValidationError, UpstreamFormatError, UpstreamUnavailable
from ielts_feedback.fallback import build_fallback_analysis
from ielts_feedback.reference_data import ReferenceData, load_reference_data
from ielts_feedback.schemas import EssaySubmission


REFERENCE = ReferenceData(training_examples="EXAMPLES-MARKER", rubric_criteria="RUBRIC-MARKER")

ELEMENT_JSON = json.dumps({
    "elements": {
        "lead": {"text": "Technology shapes modern classrooms.", "effectiveness": "Effective"},
        "claims": [{"text": "Firstly, online resources widen access to knowledge.", "effectiveness": "Effective"}],
        "evidence": [],
    }
})
LINGUISTIC_JSON = json.dumps({
    "linguisticMetrics": {
        "lexicalDiversity": 0.6,
        "academicWordCoverage": 10.0,
        "lexicalPrevalence": 3.0,
        "cUnitComplexity": 1.3,
        "verbPhraseRatio": 1.1,
        "dependentClauseRatio": 0.3,
    }
})
HOLISTIC_JSON = json.dumps({
    "holisticScore": 8.0,
    "confidence": "High (90%)",
    "rubricScores": {
        "taskAchievement": 8,
        "coherenceCohesion": 8,
        "lexicalResource": 7.5,
        "grammaticalRange": 8,
    },
    "recommendations": ["one", "two", "three"],
})


class FakeClient:
    """Answers each analysis prompt with a canned response."""

    def __init__(self, element=ELEMENT_JSON, linguistic=LINGUISTIC_JSON, holistic=HOLISTIC_JSON):
        self.responses = {"element": element, "linguistic": linguistic, "holistic": holistic}
        self.calls = []
        self.aclose = AsyncMock()

    async def generate(self, prompt, *, temperature=None, thinking_budget=None):
        if "argumentative elements" in prompt:
            kind = "element"
        elif "linguistic features" in prompt:
            kind = "linguistic"
        else:
            kind = "holistic"
        self.calls.append((kind, temperature, prompt))
        response = self.responses[kind]
        if isinstance(response, Exception):
            raise response
        return response


def _submission(essay, prompt):
    return EssaySubmission(essay=essay, prompt=prompt)


class TestExtractJsonObject:
    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_code_fence_and_prose(self):
        text = 'Here you go:\n```json\n{"a": {"b": 2}}\n```\nHope this helps {not json}'
        assert extract_json_object(text) == {"a": {"b": 2}}

    def test_braces_inside_strings(self):
        text = 'Result: {"text": "a } tricky { string \\" quote", "n": 1} trailing'
        assert extract_json_object(text) == {"text": 'a } tricky { string " quote', "n": 1}

    def test_first_object_wins(self):
        assert extract_json_object('{"a": 1} {"b": 2}') == {"a": 1}

    @pytest.mark.parametrize("text", ["no json here", "{'single': 'quotes'}", '{"open": 1', "", "[1, 2]"])
    def test_unusable_text(self, text):
        with pytest.raises(UpstreamFormatError):
            extract_json_object(text)


class TestGatherAll:
    @pytest.mark.asyncio
    async def test_returns_results_in_call_order(self):
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        assert await gather_all(value("a", 0.02), value("b", 0), value("c", 0.01)) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_failure_cancels_siblings(self):
        cancelled = asyncio.Event()

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return "late"

        async def failing():
            await asyncio.sleep(0)
            raise UpstreamUnavailable("down")

        with pytest.raises(UpstreamUnavailable):
            await gather_all(slow(), failing())
        assert cancelled.is_set()


class TestEssayAnalyzer:
    @pytest.mark.asyncio
    async def test_llm_path_merges_three_calls(self, rich_essay, task_prompt, configured_settings):
        client = FakeClient()
        analyzer = EssayAnalyzer(REFERENCE, config=configured_settings, client_factory=lambda: client)

        result = await analyzer.analyze(_submission(rich_essay, task_prompt))

        assert result.holistic_score == 8.0
        assert result.recommendations == ["one", "two", "three"]
        assert result.elements.claims[0].span is not None
        assert sorted(kind for kind, _, _ in client.calls) == ["element", "holistic", "linguistic"]
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_prompts_embed_reference_data(self, rich_essay, task_prompt, configured_settings):
        client = FakeClient()
        analyzer = EssayAnalyzer(REFERENCE, config=configured_settings, client_factory=lambda: client)

        await analyzer.analyze(_submission(rich_essay, task_prompt))

        prompts = {kind: (temperature, prompt) for kind, temperature, prompt in client.calls}
        assert "EXAMPLES-MARKER" in prompts["element"][1]
        assert "RUBRIC-MARKER" in prompts["holistic"][1]
        assert task_prompt in prompts["linguistic"][1]
        assert prompts["element"][0] == 0.3
        assert prompts["linguistic"][0] == 0.1
        assert prompts["holistic"][0] == 0.2

    @pytest.mark.asyncio
    async def test_unconfigured_uses_fallback_without_client(self, rich_essay, task_prompt, unconfigured_settings):
        factory = MagicMock()
        analyzer = EssayAnalyzer(REFERENCE, config=unconfigured_settings, client_factory=factory)

        result = await analyzer.analyze(_submission(rich_essay, task_prompt))

        assert result == build_fallback_analysis(rich_essay, task_prompt)
        factory.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"holistic": UpstreamUnavailable("503 from upstream")},
            {"linguistic": "Sorry, I cannot help with that."},
            {"element": '{"elements": {"lead": '},
            {"holistic": json.dumps({"holisticScore": 12})},
        ],
    )
    async def test_any_upstream_failure_falls_back(self, overrides, rich_essay, task_prompt, configured_settings):
        client = FakeClient(**overrides)
        analyzer = EssayAnalyzer(REFERENCE, config=configured_settings, client_factory=lambda: client)

        result = await analyzer.analyze(_submission(rich_essay, task_prompt))

        assert result == build_fallback_analysis(rich_essay, task_prompt)
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_construction_failure_falls_back(self, plain_essay, task_prompt, configured_settings):
        def factory():
            raise UpstreamUnavailable("GEMINI_API_KEY is not configured")

        analyzer = EssayAnalyzer(REFERENCE, config=configured_settings, client_factory=factory)

        result = await analyzer.analyze(_submission(plain_essay, task_prompt))

        assert result.holistic_score == 5.0

    @pytest.mark.asyncio
    async def test_validation_runs_before_any_analysis(self, task_prompt, configured_settings):
        factory = MagicMock()
        analyzer = EssayAnalyzer(REFERENCE, config=configured_settings, client_factory=factory)

        with pytest.raises(EssayValidationError, match="Essay must be at least 200 words"):
            await analyzer.analyze(_submission("too short", task_prompt))
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, rich_essay, task_prompt, configured_settings):
        started = asyncio.Event()
        client = FakeClient()

        async def hang(prompt, **kwargs):
            started.set()
            await asyncio.sleep(10)

        client.generate = hang
        analyzer = EssayAnalyzer(REFERENCE, config=configured_settings, client_factory=lambda: client)

        task = asyncio.ensure_future(analyzer.analyze(_submission(rich_essay, task_prompt)))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        client.aclose.assert_awaited_once()


class TestReferenceData:
    def test_packaged_defaults(self):
        reference = load_reference_data(None)
        assert "Lead" in reference.training_examples
        assert "Coherence and Cohesion" in reference.rubric_criteria

    def test_override_directory(self, tmp_path):
        (tmp_path / "training_examples.txt").write_text("Custom example\n", encoding="utf-8")
        reference = load_reference_data(str(tmp_path))
        assert reference.training_examples == "Custom example"
        # rubric falls back to the packaged file
        assert "Lexical Resource" in reference.rubric_criteria
