"""Pytest fixtures for essay feedback tests."""

import pytest

from ielts_feedback.settings import Settings

from essays import TASK_PROMPT, make_essay, plain_short_essay


@pytest.fixture
def plain_essay() -> str:
    return plain_short_essay()


@pytest.fixture
def task_prompt() -> str:
    return TASK_PROMPT


@pytest.fixture
def rich_essay() -> str:
    """450+ words with furthermore, In my opinion and Nevertheless."""
    return make_essay(
        "Technology shapes modern classrooms.",
        "In my opinion, schools should adopt digital tools carefully.",
        "Firstly, online resources widen access to knowledge.",
        "Secondly, interactive software keeps pupils engaged.",
        "For example, language apps give instant feedback.",
        "However, some critics say screens distract learners.",
        "Nevertheless, good teaching can manage these risks.",
        "The evidence is significant and furthermore it is growing.",
        words=450,
    ) + " In conclusion, technology helps when it is used with care."


@pytest.fixture
def unconfigured_settings(monkeypatch) -> Settings:
    for var in ("GEMINI_API_KEY", "OPENROUTER_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def configured_settings(monkeypatch) -> Settings:
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    return Settings(_env_file=None, GEMINI_API_KEY="test-key")
