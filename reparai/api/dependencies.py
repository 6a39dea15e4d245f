"""FastAPI dependencies."""

from functools import lru_cache

from reparai.config.settings import get_settings
from reparai.funnel.session_store import FunnelSessionStore
from reparai.infrastructure.cache.question_cache import AnalysisCache, QuestionCache
from reparai.services.diagnostics import (
    DiagnosticService,
    LLMQuestionGenerator,
    LLMRequestAnalyzer,
)


@lru_cache
def get_question_cache() -> QuestionCache:
    settings = get_settings()
    return QuestionCache(
        max_size=settings.question_cache_max_size,
        ttl_seconds=settings.question_cache_ttl,
    )


@lru_cache
def get_analysis_cache() -> AnalysisCache:
    settings = get_settings()
    return AnalysisCache(
        max_size=settings.analysis_cache_max_size,
        ttl_seconds=settings.analysis_cache_ttl,
    )


@lru_cache
def get_diagnostic_service() -> DiagnosticService:
    """Shared service backed by the LLM collaborators."""
    settings = get_settings()
    return DiagnosticService(
        generator=LLMQuestionGenerator(settings),
        analyzer=LLMRequestAnalyzer(settings),
        question_cache=get_question_cache(),
        generation_timeout=settings.generation_timeout,
        analysis_timeout=settings.analysis_timeout,
    )


@lru_cache
def get_session_store() -> FunnelSessionStore:
    return FunnelSessionStore(ttl_seconds=get_settings().session_ttl_seconds)
