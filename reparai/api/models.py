"""Request/Response models for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from reparai.config.constants import (
    MANUAL_ANSWER_VALUES,
    MANUAL_OPTION_LABEL,
    MANUAL_OPTION_VALUE,
    QuestionType,
)
from reparai.funnel.controller import FunnelController
from reparai.funnel.models import ClassificationResult, DiagnosticQuestion, QuestionOption


class CreateFunnelRequest(BaseModel):
    """Request to open a diagnostic funnel."""

    domain: str = Field(..., min_length=1, description="Domain slug, e.g. casa")
    description: str = Field("", description="Free-text complaint typed by the user")


class AnswerRequest(BaseModel):
    """Answer to the current question."""

    value: str = Field(..., description="Option value, or 'outro' to type it manually")


class ManualInputRequest(BaseModel):
    """Free text for the current question."""

    text: str = Field(..., description="What the user typed")


class QuestionView(BaseModel):
    """A question as shown to the user."""

    id: str
    text: str
    type: QuestionType
    options: list[QuestionOption] = []


class FunnelView(BaseModel):
    """Snapshot of a funnel session."""

    session_id: str
    domain: str
    state: str
    current_step: int
    total_questions: int
    max_questions: int
    progress: float
    confidence: float
    awaiting_manual_input: bool
    current_question: QuestionView | None = None
    answers: dict[str, str] = {}
    qa_history: list[dict[str, str]] = []
    finish_reason: str | None = None
    error: str | None = None
    ai_result: ClassificationResult | None = None


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")


def _is_manual_option(option: QuestionOption) -> bool:
    return (
        option.value.strip().lower() in MANUAL_ANSWER_VALUES
        or "outro" in option.label.lower()
    )


def question_view(question: DiagnosticQuestion) -> QuestionView:
    """Replace generator-made "other" options with the standard manual option."""
    options = list(question.options)
    if question.type == QuestionType.SELECT or options:
        options = [o for o in options if not _is_manual_option(o)]
        options.append(QuestionOption(label=MANUAL_OPTION_LABEL, value=MANUAL_OPTION_VALUE))
    return QuestionView(id=question.id, text=question.text, type=question.type, options=options)


def funnel_view(controller: FunnelController) -> dict[str, Any]:
    """Build a FunnelView-compatible dict with Pydantic validation."""
    s = controller.session
    question = controller.current_question
    return FunnelView(
        session_id=s.session_id,
        domain=s.domain,
        state=s.state.value,
        current_step=s.current_step,
        total_questions=len(s.history),
        max_questions=controller.limits.max_questions,
        progress=controller.progress,
        confidence=s.confidence,
        awaiting_manual_input=s.awaiting_manual_input,
        current_question=question_view(question) if question else None,
        answers=dict(s.answers),
        qa_history=s.qa_history(),
        finish_reason=s.finish_reason.value if s.finish_reason else None,
        error=s.last_error,
        ai_result=s.classification,
    ).model_dump(mode="json")
