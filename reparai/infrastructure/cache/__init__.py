"""Cache infrastructure module."""

from reparai.infrastructure.cache.bounded_cache import BoundedCache
from reparai.infrastructure.cache.question_cache import (
    AnalysisCache,
    QuestionCache,
    make_cache_key,
)

__all__ = [
    "AnalysisCache",
    "BoundedCache",
    "QuestionCache",
    "make_cache_key",
]
