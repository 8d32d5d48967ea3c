import logging
import sys
from collections.abc import Callable
from typing import Any, Literal

import structlog
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite:///studybuddy.db"
    SECRET_KEY: str
    ENVIRONMENT: Literal["development", "production", "test"] = "development"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    JWT_ACCESS_COOKIE_NAME: str = "access_token"
    JWT_COOKIE_DOMAIN: str | None = None
    JWT_COOKIE_SECURE: bool = False
    JWT_COOKIE_SAMESITE: str = "lax"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    SEARCH_RESULT_LIMIT: int = 20
    AI_MAX_CARDS: int = 20

    # AI generation
    AI_PROVIDER: Literal["openai", "anthropic", "google", "ollama"] | None = None
    AI_MODEL_NAME: str | None = None
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    ANTHROPIC_API_KEY: str | None = None
    GEMINI_API_KEY: str | None = None

    @property
    def ai_enabled(self) -> bool:
        return self.AI_PROVIDER is not None

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @model_validator(mode="after")
    def _check_ai_provider(self) -> "Settings":
        if self.AI_PROVIDER is None:
            return self
        if not self.AI_MODEL_NAME:
            raise ValueError("AI_MODEL_NAME is required when AI_PROVIDER is set")
        required = {
            "openai": ("OPENAI_API_KEY", self.OPENAI_API_KEY),
            "anthropic": ("ANTHROPIC_API_KEY", self.ANTHROPIC_API_KEY),
            "google": ("GEMINI_API_KEY", self.GEMINI_API_KEY),
            "ollama": ("OPENAI_BASE_URL", self.OPENAI_BASE_URL),
        }
        name, value = required[self.AI_PROVIDER]
        if not value:
            raise ValueError(f"{name} is required when AI_PROVIDER is '{self.AI_PROVIDER}'")
        return self


def configure_logging(environment: str = "development") -> None:
    """Configure structlog on top of stdlib logging.

    Production gets JSON lines, everything else the colored console renderer.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


settings = Settings()
