"""Pytest configuration and fixtures."""

import asyncio
from typing import Any

import pytest

from reparai.config.settings import Settings
from reparai.funnel.controller import FunnelController
from reparai.funnel.finalizer import ClassificationFinalizer
from reparai.funnel.session import FunnelLimits, FunnelSession
from reparai.infrastructure.cache.question_cache import AnalysisCache, QuestionCache
from reparai.services.diagnostics.service import DiagnosticService


def _question(
    qid: str,
    text: str,
    qtype: str = "select",
    options: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    if options is None and qtype == "select":
        options = [{"label": "🚗 Carro", "value": "carro"}, {"label": "🏍️ Moto", "value": "moto"}]
    return {"id": qid, "text": text, "type": qtype, "options": options or []}


class ScriptedGenerator:
    """Question generator replaying a fixed list of responses (last one repeats)."""

    def __init__(self, responses: list[Any]):
        self.responses = list(responses)
        self.calls: list[Any] = []

    async def __call__(self, request):
        self.calls.append(request)
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


class BlockingGenerator(ScriptedGenerator):
    """Scripted generator that waits for ``release`` before answering."""

    def __init__(self, responses: list[Any]):
        super().__init__(responses)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self, request):
        self.started.set()
        await self.release.wait()
        return await super().__call__(request)


class FakeAnalyzer:
    """Request analyzer returning a fixed classification, or raising."""

    def __init__(self, analysis: dict[str, Any] | None = None, error: Exception | None = None):
        self.analysis = analysis or {
            "domain": "casa",
            "asset_type": "chuveiro",
            "service_type": "eletrica",
            "issue_tags": ["resistencia", "queimada"],
            "problem_guess": "Resistencia queimada",
            "confidence": 0.85,
            "summary_for_provider": "Chuveiro nao esquenta. Provavel resistencia queimada.",
        }
        self.error = error
        self.calls: list[Any] = []

    async def __call__(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return {"analysis": self.analysis, "providers": []}


@pytest.fixture
def settings():
    """Provide settings fixture."""
    return Settings()


@pytest.fixture
def make_question():
    return _question


@pytest.fixture
def funnel_factory():
    """Build a FunnelController wired to fake collaborators."""

    def _build(
        generator,
        analyzer=None,
        *,
        domain: str = "casa",
        description: str = "",
        limits: FunnelLimits | None = None,
        generation_timeout: float = 5.0,
    ) -> FunnelController:
        service = DiagnosticService(
            generator=generator,
            analyzer=analyzer or FakeAnalyzer(),
            question_cache=QuestionCache(max_size=100, ttl_seconds=3600),
            generation_timeout=generation_timeout,
            analysis_timeout=5.0,
        )
        finalizer = ClassificationFinalizer(service, AnalysisCache(max_size=100, ttl_seconds=3600))
        session = FunnelSession(domain=domain, description=description)
        return FunnelController(session, service, finalizer, limits or FunnelLimits())

    return _build


@pytest.fixture
def scripted_generator():
    return ScriptedGenerator


@pytest.fixture
def blocking_generator():
    return BlockingGenerator


@pytest.fixture
def fake_analyzer():
    return FakeAnalyzer
