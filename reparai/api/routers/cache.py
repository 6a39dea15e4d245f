"""Cache management endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from reparai.api.dependencies import get_analysis_cache, get_question_cache
from reparai.infrastructure.cache.question_cache import AnalysisCache, QuestionCache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def get_cache_stats(
    question_cache: QuestionCache = Depends(get_question_cache),  # noqa: B008
    analysis_cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
) -> dict[str, Any]:
    """Return hit/miss statistics for the question and analysis caches."""
    return {
        "questions": question_cache.get_stats(),
        "analysis": analysis_cache.get_stats(),
    }


@router.delete("")
async def clear_cache(
    question_cache: QuestionCache = Depends(get_question_cache),  # noqa: B008
    analysis_cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
) -> dict[str, str]:
    """Invalidate all cached generations and analyses."""
    logger.warning("Diagnostic caches cleared via API request")
    question_cache.clear()
    analysis_cache.clear()
    return {"message": "Cache cleared successfully", "status": "success"}
