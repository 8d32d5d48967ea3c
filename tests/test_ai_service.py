"""Tests for the pydantic-ai backed flashcard generator."""

import json

import pytest
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from core.exceptions import GenerationError
from services.ai_service import FlashcardGenerator, _build_model, build_prompt


def _model_returning(text: str, seen: list[str] | None = None) -> FunctionModel:
    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if seen is not None:
            seen.extend(
                part.content
                for message in messages
                for part in message.parts
                if getattr(part, "part_kind", None) == "user-prompt"
            )
        return ModelResponse(parts=[TextPart(text)])

    return FunctionModel(respond)


class TestBuildPrompt:
    def test_includes_topic_count_and_difficulty(self) -> None:
        prompt = build_prompt(topic="Photosynthesis", count=5, difficulty="hard")
        assert "5 hard level" in prompt
        assert '"Photosynthesis"' in prompt
        assert "Additional context" not in prompt

    def test_context_is_appended(self) -> None:
        prompt = build_prompt(topic="Cells", count=3, difficulty="easy", context="chapter 2 only")
        assert prompt.endswith("Additional context: chapter 2 only")


class TestFlashcardGenerator:
    @pytest.mark.asyncio
    async def test_returns_raw_model_text(self) -> None:
        payload = json.dumps([{"question": "What is a cell?", "answer": "The basic unit of life"}])
        seen: list[str] = []
        generator = FlashcardGenerator(model=_model_returning(payload, seen))

        output = await generator(topic="Cells", count=1, difficulty="easy")

        assert output == payload
        assert any("Cells" in prompt for prompt in seen)

    @pytest.mark.asyncio
    async def test_blank_output_is_an_error(self) -> None:
        generator = FlashcardGenerator(model=_model_returning("   "))

        with pytest.raises(GenerationError):
            await generator(topic="Cells", count=1, difficulty="easy")

    @pytest.mark.asyncio
    async def test_provider_failure_is_wrapped(self) -> None:
        def fail(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            raise ModelHTTPError(status_code=503, model_name="function")

        generator = FlashcardGenerator(model=FunctionModel(fail))

        with pytest.raises(GenerationError):
            await generator(topic="Cells", count=1, difficulty="easy")

    def test_unconfigured_provider(self) -> None:
        with pytest.raises(GenerationError):
            _build_model()
