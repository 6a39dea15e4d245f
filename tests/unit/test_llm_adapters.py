"""Tests for the LLM-backed generator and analyzer adapters and the agent executor."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from reparai.funnel.models import (
    AnalysisRequest,
    ClassificationResult,
    DiagnosticQuestion,
    GenerationRequest,
    GenerationResponse,
)
from reparai.infrastructure.llm.executor import _coerce, run_agent_with_format
from reparai.services.diagnostics.analyzer import LLMRequestAnalyzer
from reparai.services.diagnostics.generator import LLMQuestionGenerator


class FakeAgent:
    def __init__(self, results):
        self.results = list(results)
        self.inputs = []

    async def run(self, text, response_format=None):
        self.inputs.append((text, response_format))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class TestExecutor:
    def test_coerce_prefers_structured_value(self):
        value = GenerationResponse(questions=[], confidence=0.5)
        assert _coerce(SimpleNamespace(value=value, text=""), GenerationResponse) is value

    def test_coerce_parses_text(self):
        result = SimpleNamespace(value=None, text='```json\n{"questions": [], "confidence": 0.8}\n```')
        parsed = _coerce(result, GenerationResponse)
        assert isinstance(parsed, GenerationResponse)
        assert parsed.confidence == 0.8

    def test_coerce_returns_text_when_invalid(self):
        result = SimpleNamespace(value=None, text='{"confidence": "alta"}')
        assert _coerce(result, GenerationResponse) == '{"confidence": "alta"}'

    def test_coerce_empty_output(self):
        assert _coerce(SimpleNamespace(value=None, text=None), GenerationResponse) == ""

    @pytest.mark.asyncio
    async def test_run_agent_retries_transient_failure(self):
        agent = FakeAgent(
            [
                RuntimeError("rate limit exceeded"),
                SimpleNamespace(value=None, text='{"questions": [], "confidence": 0.3}'),
            ]
        )

        with patch("reparai.utils.retry.asyncio.sleep", new=AsyncMock()):
            result = await run_agent_with_format(
                agent, "entrada", GenerationResponse, max_retries=2, initial_delay=0.0
            )

        assert result.confidence == 0.3
        assert agent.inputs == [("entrada", GenerationResponse)] * 2


class TestQuestionGenerator:
    @pytest.mark.asyncio
    async def test_returns_model_dump(self, settings):
        response = GenerationResponse(
            questions=[DiagnosticQuestion(id="q1", text="Esta ligado?", type="boolean")],
            confidence=0.4,
        )
        with patch(
            "reparai.services.diagnostics.generator.run_formatted_agent",
            new=AsyncMock(return_value=response),
        ) as run:
            data = await LLMQuestionGenerator(settings)(
                GenerationRequest(domain="casa", answers={"q0": "sim"}, min_confidence=0.7)
            )

        assert data["confidence"] == 0.4
        assert data["questions"][0]["id"] == "q1"
        kwargs = run.await_args.kwargs
        assert kwargs["response_format"] is GenerationResponse
        assert kwargs["model"] == settings.generation_agent_model
        assert "casa" in kwargs["message"]

    @pytest.mark.asyncio
    async def test_reparses_raw_text(self, settings):
        with patch(
            "reparai.services.diagnostics.generator.run_formatted_agent",
            new=AsyncMock(return_value='Segue: {"questions": [], "confidence": 0.9}'),
        ):
            data = await LLMQuestionGenerator(settings)(
                GenerationRequest(domain="casa", min_confidence=0.7)
            )

        assert data == {"questions": [], "confidence": 0.9}

    @pytest.mark.asyncio
    async def test_no_json_becomes_error_payload(self, settings):
        with patch(
            "reparai.services.diagnostics.generator.run_formatted_agent",
            new=AsyncMock(return_value="desculpe, nao entendi"),
        ):
            data = await LLMQuestionGenerator(settings)(
                GenerationRequest(domain="casa", min_confidence=0.7)
            )

        assert "error" in data


class TestRequestAnalyzer:
    @pytest.mark.asyncio
    async def test_wraps_analysis_without_providers(self, settings):
        result = ClassificationResult(
            domain="casa", asset_type="pia", service_type="hidraulica", confidence=0.8
        )
        with patch(
            "reparai.services.diagnostics.analyzer.run_formatted_agent",
            new=AsyncMock(return_value=result),
        ):
            data = await LLMRequestAnalyzer(settings)(
                AnalysisRequest(category="casa", answers={"q1": "pia"}, user_text="vazando")
            )

        assert data["analysis"]["asset_type"] == "pia"
        assert data["providers"] == []

    @pytest.mark.asyncio
    async def test_fills_missing_domain_from_category(self, settings):
        raw = '{"asset_type": "bicicleta", "service_type": "mecanica", "confidence": 0.6}'
        with patch(
            "reparai.services.diagnostics.analyzer.run_formatted_agent",
            new=AsyncMock(return_value=raw),
        ):
            data = await LLMRequestAnalyzer(settings)(AnalysisRequest(category="mobilidade"))

        assert data["analysis"]["domain"] == "mobilidade"


@pytest.mark.asyncio
async def test_runner_opens_agent_and_applies_retry_settings(settings):
    from contextlib import asynccontextmanager

    from reparai.infrastructure.llm.runner import _LLMDeps, run_formatted_agent

    opened = {}
    agent = object()

    @asynccontextmanager
    async def fake_open_agent(settings_, name, instructions, model, **kwargs):
        opened.update(name=name, model=model, **kwargs)
        yield agent

    run = AsyncMock(return_value="texto")
    deps = _LLMDeps(open_agent=fake_open_agent, run_agent_with_format=run)

    with patch("reparai.infrastructure.llm.runner._lazy_imports", return_value=deps):
        result = await run_formatted_agent(
            settings,
            "QuestionGenerator",
            "instrucoes",
            "mensagem",
            response_format=GenerationResponse,
            model="claude-sonnet-4-5",
            temperature=0.2,
        )

    assert result == "texto"
    assert opened["model"] == "claude-sonnet-4-5"
    assert opened["response_format"] is GenerationResponse
    assert opened["temperature"] == 0.2
    run.assert_awaited_once_with(
        agent,
        "mensagem",
        GenerationResponse,
        max_retries=settings.llm_max_retries,
        initial_delay=settings.llm_retry_delay,
        backoff_factor=settings.retry_backoff_factor,
    )
