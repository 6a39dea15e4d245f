"""Classification finalizer - turns a finished funnel into a taxonomy position."""

import logging
from collections.abc import Mapping

from reparai.exceptions import AnalysisError
from reparai.funnel.models import ClassificationResult
from reparai.infrastructure.cache.question_cache import AnalysisCache, make_cache_key
from reparai.services.diagnostics.service import DiagnosticService

logger = logging.getLogger(__name__)


class ClassificationFinalizer:
    """Runs the one-shot analysis once the funnel stops asking questions."""

    def __init__(self, service: DiagnosticService, cache: AnalysisCache):
        self.service = service
        self.cache = cache

    async def finalize(
        self,
        domain: str,
        answers: Mapping[str, str],
        text: str | None = None,
        *,
        request_id: str | None = None,
        lat: float | None = None,
        lng: float | None = None,
    ) -> ClassificationResult | None:
        """Return the classification, or None when analysis is unavailable.

        Failures are logged and swallowed so the request can still be submitted
        without an AI summary.
        """
        answers = dict(answers)
        cached = self.cache.lookup(domain, answers, text)
        if cached is not None:
            return cached

        try:
            response = await self.service.analyze_request(
                domain, answers, text, request_id=request_id, lat=lat, lng=lng
            )
        except AnalysisError as e:
            logger.warning("Classification skipped for domain=%s: %s", domain, e)
            return None

        result = response.analysis
        logger.info(
            "Classified request: %s/%s/%s tags=%s confidence=%.2f",
            result.domain,
            result.asset_type,
            result.service_type,
            result.issue_tags,
            result.confidence,
        )
        self.cache.store(make_cache_key(domain, answers, text), result)
        return result
