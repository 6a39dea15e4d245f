"""Funnel session state owned by the caller."""

import uuid
from dataclasses import dataclass, field
from typing import Any

from reparai.config.constants import FinishReason, FunnelState
from reparai.config.settings import Settings
from reparai.funnel.models import ClassificationResult, DiagnosticQuestion


@dataclass(frozen=True)
class FunnelLimits:
    """Termination limits for one funnel run."""

    confidence_threshold: float = 0.7
    max_questions: int = 5

    @classmethod
    def for_domain(cls, settings: Settings, domain: str) -> "FunnelLimits":
        """Resolve limits for *domain*, falling back to the global defaults."""
        return cls(
            confidence_threshold=settings.funnel_domain_thresholds.get(
                domain, settings.funnel_confidence_threshold
            ),
            max_questions=settings.funnel_domain_max_questions.get(
                domain, settings.funnel_max_questions
            ),
        )


@dataclass
class FunnelSession:
    """State of a single diagnostic funnel, i.e. the funnel part of a request draft."""

    # Input
    domain: str
    description: str = ""
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    # Answers and questions
    answers: dict[str, str] = field(default_factory=dict)
    history: list[DiagnosticQuestion] = field(default_factory=list)
    current_step: int = 0

    # Progress
    state: FunnelState = FunnelState.COLD_START
    confidence: float = 0.0
    finish_reason: FinishReason | None = None
    generation_calls: int = 0

    # Manual free-text capture
    awaiting_manual_input: bool = False

    # Last transient failure shown to the user
    last_error: str | None = None

    # Final classification (None when analysis failed or has not run)
    classification: ClassificationResult | None = None

    closed: bool = False

    # Bumped on reset/close so in-flight results can be recognized as stale
    epoch: int = 0

    @property
    def current_question(self) -> DiagnosticQuestion | None:
        if 0 <= self.current_step < len(self.history):
            return self.history[self.current_step]
        return None

    @property
    def is_last_step(self) -> bool:
        return self.current_step >= len(self.history) - 1

    def answer_snapshot(self) -> dict[str, str]:
        """Copy of the answers to hand to an async call."""
        return dict(self.answers)

    def qa_history(self) -> list[dict[str, str]]:
        """Answered questions in the order they were asked."""
        return [
            {"id": q.id, "question": q.text, "answer": self.answers[q.id]}
            for q in self.history
            if q.id in self.answers
        ]

    def clear_funnel(self) -> None:
        """Drop answers, questions and results, keeping domain and description."""
        self.answers = {}
        self.history = []
        self.current_step = 0
        self.state = FunnelState.COLD_START
        self.confidence = 0.0
        self.finish_reason = None
        self.awaiting_manual_input = False
        self.last_error = None
        self.classification = None
        self.epoch += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "domain": self.domain,
            "description": self.description,
            "answers": dict(self.answers),
            "history": [q.model_dump(mode="json") for q in self.history],
            "current_step": self.current_step,
            "state": self.state.value,
            "confidence": self.confidence,
            "finish_reason": self.finish_reason.value if self.finish_reason else None,
            "generation_calls": self.generation_calls,
            "awaiting_manual_input": self.awaiting_manual_input,
            "classification": (
                self.classification.model_dump(mode="json") if self.classification else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FunnelSession":
        """Rebuild a saved draft; an interrupted generation resumes as awaiting an answer."""
        state = FunnelState(data.get("state", FunnelState.COLD_START.value))
        history = [DiagnosticQuestion.model_validate(q) for q in data.get("history", [])]
        if state in (FunnelState.GENERATING, FunnelState.ERROR):
            state = FunnelState.AWAITING_ANSWER if history else FunnelState.COLD_START
        classification = data.get("classification")
        finish_reason = data.get("finish_reason")
        return cls(
            domain=data["domain"],
            description=data.get("description", ""),
            session_id=data.get("session_id") or uuid.uuid4().hex,
            answers=dict(data.get("answers", {})),
            history=history,
            current_step=data.get("current_step", 0),
            state=state,
            confidence=data.get("confidence", 0.0),
            finish_reason=FinishReason(finish_reason) if finish_reason else None,
            generation_calls=data.get("generation_calls", 0),
            awaiting_manual_input=(
                state == FunnelState.AWAITING_ANSWER and bool(data.get("awaiting_manual_input"))
            ),
            classification=(
                ClassificationResult.model_validate(classification) if classification else None
            ),
        )
