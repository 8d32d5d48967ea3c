from functools import lru_cache

import httpx
import structlog
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import Model

from core.config import settings
from core.exceptions import GenerationError

logger = structlog.get_logger(__name__)

INSTRUCTIONS = """
You write study flashcards. Reply with a JSON array only, no prose and no
markdown. Each element is an object with a "question" and an "answer" string.
Questions must be clear; answers concise but complete.
Difficulty levels:
- easy: basic concepts and definitions
- medium: application and analysis questions
- hard: complex synthesis and evaluation questions
"""


def _build_model() -> Model:
    """Pick the pydantic-ai model for the configured provider."""
    name = settings.AI_MODEL_NAME
    if settings.AI_PROVIDER == "openai":
        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.openai import OpenAIProvider

        return OpenAIChatModel(name, provider=OpenAIProvider(api_key=settings.OPENAI_API_KEY))
    if settings.AI_PROVIDER == "ollama":
        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.ollama import OllamaProvider

        return OpenAIChatModel(name, provider=OllamaProvider(base_url=settings.OPENAI_BASE_URL))
    if settings.AI_PROVIDER == "anthropic":
        from pydantic_ai.models.anthropic import AnthropicModel
        from pydantic_ai.providers.anthropic import AnthropicProvider

        return AnthropicModel(name, provider=AnthropicProvider(api_key=settings.ANTHROPIC_API_KEY))
    if settings.AI_PROVIDER == "google":
        from pydantic_ai.models.google import GoogleModel
        from pydantic_ai.providers.google import GoogleProvider

        return GoogleModel(name, provider=GoogleProvider(api_key=settings.GEMINI_API_KEY))
    raise GenerationError("AI flashcard generation is not configured")


@lru_cache
def get_ai_model() -> Model:
    return _build_model()


def build_prompt(*, topic: str, count: int, difficulty: str, context: str | None = None) -> str:
    prompt = f'Generate {count} {difficulty} level flashcard questions and answers about "{topic}".'
    if context:
        prompt += f"\nAdditional context: {context}"
    return prompt


class FlashcardGenerator:
    """Text-generation collaborator.

    Returns the model's raw text; shape validation happens in
    ``FlashcardService`` before anything is written.
    """

    def __init__(self, model: Model | None = None):
        self._model = model

    def _agent(self) -> Agent[None, str]:
        model = self._model if self._model is not None else get_ai_model()
        return Agent(model, output_type=str, instructions=INSTRUCTIONS)

    async def __call__(self, *, topic: str, count: int, difficulty: str, context: str | None = None) -> str:
        agent = self._agent()
        prompt = build_prompt(topic=topic, count=count, difficulty=difficulty, context=context)
        try:
            result = await agent.run(prompt)
        except (AgentRunError, httpx.HTTPError) as exc:
            logger.exception("flashcard_generation_request_failed", topic=topic, count=count)
            raise GenerationError() from exc

        if not result.output or not result.output.strip():
            raise GenerationError("No content generated")
        return result.output


def get_flashcard_generator() -> FlashcardGenerator:
    return FlashcardGenerator()
