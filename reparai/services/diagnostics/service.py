"""Cached, validated access to the question generator and request analyzer."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from reparai.exceptions import AnalysisError, GenerationError
from reparai.funnel.models import (
    AnalysisRequest,
    AnalysisResponse,
    GenerationRequest,
    GenerationResponse,
)
from reparai.infrastructure.cache.question_cache import QuestionCache, make_cache_key

logger = logging.getLogger(__name__)

QuestionGenerator = Callable[[GenerationRequest], Awaitable[Any]]
RequestAnalyzer = Callable[[AnalysisRequest], Awaitable[Any]]


def _payload_error(raw: Any) -> str | None:
    if isinstance(raw, Mapping) and raw.get("error"):
        return str(raw["error"])
    return None


def _parse(model: type[BaseModel], raw: Any) -> BaseModel:
    if isinstance(raw, model):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    return model.model_validate(raw)


class DiagnosticService:
    """Wraps the two AI collaborators with caching, timeouts and schema checks.

    Every call takes an explicit answers snapshot; nothing is read from funnel
    state.
    """

    def __init__(
        self,
        generator: QuestionGenerator,
        analyzer: RequestAnalyzer,
        question_cache: QuestionCache,
        *,
        generation_timeout: float = 15.0,
        analysis_timeout: float = 15.0,
    ):
        self._generator = generator
        self._analyzer = analyzer
        self.question_cache = question_cache
        self.generation_timeout = generation_timeout
        self.analysis_timeout = analysis_timeout

    async def generate_questions(
        self,
        domain: str,
        answers: Mapping[str, str],
        text: str | None = None,
        *,
        min_confidence: float = 0.7,
    ) -> GenerationResponse:
        """Return the next questions for *answers*, from cache when possible.

        Raises:
            GenerationError: on collaborator failure, timeout or malformed data.
        """
        answers = dict(answers)
        cached = self.question_cache.lookup(domain, answers, text)
        if cached is not None:
            return cached

        request = GenerationRequest(
            domain=domain,
            answers=answers,
            user_text=text or None,
            min_confidence=min_confidence,
        )
        try:
            raw = await asyncio.wait_for(self._generator(request), timeout=self.generation_timeout)
        except asyncio.TimeoutError as e:
            logger.warning(
                "Question generation timed out after %.1fs (domain=%s)",
                self.generation_timeout,
                domain,
            )
            raise GenerationError(
                f"Question generation timed out after {self.generation_timeout}s",
                timeout=True,
            ) from e
        except GenerationError:
            raise
        except Exception as e:
            logger.error("Question generation failed (domain=%s): %s", domain, e, exc_info=True)
            raise GenerationError(f"Question generation failed: {e}") from e

        error = _payload_error(raw)
        if error:
            raise GenerationError(f"Question generator returned an error: {error}")
        try:
            result = _parse(GenerationResponse, raw)
        except ValidationError as e:
            logger.warning("Malformed generation response: %s", e)
            raise GenerationError(f"Malformed generation response: {e}") from e

        logger.info(
            "Generated %d question(s) with confidence %.2f (domain=%s, answers=%d)",
            len(result.questions),
            result.confidence,
            domain,
            len(answers),
        )
        self.question_cache.store(make_cache_key(domain, answers, text), result)
        return result

    async def analyze_request(
        self,
        domain: str,
        answers: Mapping[str, str],
        text: str | None = None,
        *,
        request_id: str | None = None,
        lat: float | None = None,
        lng: float | None = None,
    ) -> AnalysisResponse:
        """Classify the complete answer set into the service taxonomy.

        Raises:
            AnalysisError: on collaborator failure, timeout or malformed data.
        """
        request = AnalysisRequest(
            request_id=request_id,
            category=domain,
            answers=dict(answers),
            user_text=text or None,
            lat=lat,
            lng=lng,
        )
        try:
            raw = await asyncio.wait_for(self._analyzer(request), timeout=self.analysis_timeout)
        except asyncio.TimeoutError as e:
            raise AnalysisError(
                f"Request analysis timed out after {self.analysis_timeout}s"
            ) from e
        except AnalysisError:
            raise
        except Exception as e:
            raise AnalysisError(f"Request analysis failed: {e}") from e

        error = _payload_error(raw)
        if error:
            raise AnalysisError(f"Request analyzer returned an error: {error}")
        try:
            return _parse(AnalysisResponse, raw)
        except ValidationError as e:
            raise AnalysisError(f"Malformed analysis response: {e}") from e
