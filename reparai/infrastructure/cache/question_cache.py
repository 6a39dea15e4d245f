"""Memoization of generator and analyzer results keyed by funnel inputs."""

import json
import logging
from typing import Any, Mapping

from reparai.funnel.models import ClassificationResult, GenerationResponse
from reparai.infrastructure.cache.bounded_cache import BoundedCache

logger = logging.getLogger(__name__)


def make_cache_key(domain: str, answers: Mapping[str, str], text: str | None) -> str:
    """Serialize (domain, answers, text) into a deterministic cache key.

    Answer order does not matter, and a missing description is the same key
    as an empty one.
    """
    payload = {
        "domain": domain,
        "answers": dict(answers),
        "text": text or "",
    }
    return json.dumps(payload, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


class _KeyedCache:
    """Shared lookup/store logic over a BoundedCache."""

    label = "cache"

    def __init__(self, max_size: int, ttl_seconds: int):
        self._cache: BoundedCache[Any] = BoundedCache(max_size=max_size, ttl_seconds=ttl_seconds)

    def lookup(self, domain: str, answers: Mapping[str, str], text: str | None) -> Any | None:
        result = self._cache.get(make_cache_key(domain, answers, text))
        if result is not None:
            logger.info("%s hit for domain=%s answers=%d", self.label, domain, len(answers))
        return result

    def store(self, key: str, result: Any) -> None:
        self._cache.set(key, result)

    def clear(self) -> None:
        self._cache.clear()

    def get_stats(self) -> dict[str, Any]:
        return self._cache.get_stats()


class QuestionCache(_KeyedCache):
    """Generated questions and confidence per (domain, answers, text)."""

    label = "Question cache"

    def lookup(
        self, domain: str, answers: Mapping[str, str], text: str | None
    ) -> GenerationResponse | None:
        return super().lookup(domain, answers, text)

    def store(self, key: str, result: GenerationResponse) -> None:
        super().store(key, result)


class AnalysisCache(_KeyedCache):
    """Classification results per (domain, answers, text).

    Request ids and coordinates are not part of the key.
    """

    label = "Analysis cache"

    def lookup(
        self, domain: str, answers: Mapping[str, str], text: str | None
    ) -> ClassificationResult | None:
        return super().lookup(domain, answers, text)

    def store(self, key: str, result: ClassificationResult) -> None:
        super().store(key, result)
