"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Reparai Diagnostic Funnel"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @model_validator(mode="after")
    def validate_timeouts_positive(self) -> "Settings":
        for field_name in ("generation_timeout", "analysis_timeout"):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def validate_funnel_limits(self) -> "Settings":
        thresholds = {"default": self.funnel_confidence_threshold, **self.funnel_domain_thresholds}
        for domain, value in thresholds.items():
            if not 0.0 < value <= 1.0:
                raise ValueError(
                    f"confidence threshold for '{domain}' must be in (0, 1], got {value}"
                )
        caps = {"default": self.funnel_max_questions, **self.funnel_domain_max_questions}
        for domain, value in caps.items():
            if value < 1:
                raise ValueError(f"max questions for '{domain}' must be at least 1, got {value}")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*'], consider restricting in production"
            )
        return self

    # Azure AI Foundry
    azure_ai_project_endpoint: str = ""

    # Anthropic
    anthropic_api_key: str | None = None

    # Question generation agent
    generation_agent_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.2
    generation_max_tokens: int = 1024

    # Request analysis agent
    analysis_agent_model: str = "gpt-4o-mini"
    analysis_temperature: float = 0.0
    analysis_max_tokens: int = 1024

    # LLM retries
    llm_max_retries: int = 2
    llm_retry_delay: float = 2.0
    retry_backoff_factor: float = 2.0

    # Funnel
    funnel_confidence_threshold: float = 0.7
    funnel_max_questions: int = 5
    funnel_domain_thresholds: dict[str, float] = {}
    funnel_domain_max_questions: dict[str, int] = {}

    # Timeouts
    generation_timeout: float = 15.0
    analysis_timeout: float = 15.0

    # Caches
    question_cache_max_size: int = 500
    question_cache_ttl: int = 3600
    analysis_cache_max_size: int = 200
    analysis_cache_ttl: int = 3600

    # Sessions
    session_ttl_seconds: int = 3600

    # CORS
    allowed_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
