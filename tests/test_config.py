"""Settings validation."""

import pydantic
import pytest

from core.config import Settings

AI_KEYS = ("AI_PROVIDER", "AI_MODEL_NAME", "OPENAI_API_KEY", "OPENAI_BASE_URL", "ANTHROPIC_API_KEY", "GEMINI_API_KEY")


@pytest.fixture(autouse=True)
def _clean_ai_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in AI_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_ai_disabled_by_default() -> None:
    settings = Settings(_env_file=None, SECRET_KEY="k")

    assert settings.ai_enabled is False
    assert settings.SEARCH_RESULT_LIMIT == 20
    assert settings.AI_MAX_CARDS == 20


def test_provider_requires_its_key() -> None:
    with pytest.raises(pydantic.ValidationError, match="OPENAI_API_KEY"):
        Settings(_env_file=None, SECRET_KEY="k", AI_PROVIDER="openai", AI_MODEL_NAME="gpt-4o-mini")


def test_provider_requires_model_name() -> None:
    with pytest.raises(pydantic.ValidationError, match="AI_MODEL_NAME"):
        Settings(_env_file=None, SECRET_KEY="k", AI_PROVIDER="anthropic", ANTHROPIC_API_KEY="sk")


def test_configured_provider() -> None:
    settings = Settings(
        _env_file=None,
        SECRET_KEY="k",
        AI_PROVIDER="anthropic",
        AI_MODEL_NAME="claude-sonnet-4-5",
        ANTHROPIC_API_KEY="sk",
    )
    assert settings.ai_enabled is True


def test_cors_origins_split() -> None:
    settings = Settings(_env_file=None, SECRET_KEY="k", CORS_ORIGINS="http://a.test, ,http://b.test")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
