"""Diagnostic funnel controller.

Drives the answer -> advance / generate -> finish cycle for one funnel session:

    COLD_START -> GENERATING -> AWAITING_ANSWER -> ... -> FINISHED
                       |                ^
                       +---> ERROR -----+   (user retries the same answer)

The controller stops asking when the generator's confidence reaches the
threshold, when history holds ``max_questions`` questions, or when a
low-confidence generation yields nothing new. Generator failures leave the
recorded answer in place and put the funnel in ERROR; they never escape.
"""

import asyncio
import logging
import time
from typing import Any

from reparai.config.constants import FinishReason, FunnelState, FunnelStep, is_manual_answer
from reparai.exceptions import (
    FunnelBusyError,
    FunnelClosedError,
    FunnelStateError,
    GenerationError,
    InvalidAnswerError,
)
from reparai.funnel.finalizer import ClassificationFinalizer
from reparai.funnel.merge import merge_questions
from reparai.funnel.models import DiagnosticQuestion
from reparai.funnel.session import FunnelLimits, FunnelSession
from reparai.infrastructure.logging.logger import StructuredLogger
from reparai.services.diagnostics.service import DiagnosticService

logger = logging.getLogger(__name__)

GENERATION_ERROR_MESSAGE = "Falha ao analisar diagnóstico. Tente novamente."


class FunnelController:
    """Owns the transitions of a single FunnelSession.

    Only one generation call may be in flight per controller; the session is
    passed in by the caller and mutated in place.
    """

    def __init__(
        self,
        session: FunnelSession,
        service: DiagnosticService,
        finalizer: ClassificationFinalizer,
        limits: FunnelLimits | None = None,
    ):
        self.session = session
        self.service = service
        self.finalizer = finalizer
        self.limits = limits or FunnelLimits()
        self._events = StructuredLogger(__name__)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> FunnelState:
        return self.session.state

    @property
    def current_question(self) -> DiagnosticQuestion | None:
        return self.session.current_question

    @property
    def progress(self) -> float:
        if not self.session.history:
            return 0.0
        return min(1.0, (self.session.current_step + 1) / self.limits.max_questions)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def start(self) -> FunnelState:
        """Fetch the first questions, or resume a draft that already has some."""
        self._ensure_usable()
        s = self.session
        if s.state == FunnelState.FINISHED:
            return s.state

        if s.history:
            if s.state != FunnelState.ERROR:
                s.current_step = len(s.history) - 1
                s.state = FunnelState.AWAITING_ANSWER
            self._log(FunnelStep.START, resumed=True)
            return s.state

        self._log(FunnelStep.START, resumed=False)
        return await self._fetch(s.answer_snapshot())

    async def answer(self, value: str) -> FunnelState:
        """Record *value* for the current question and move the funnel forward."""
        self._ensure_usable()
        s = self.session
        self._ensure_answerable()
        if s.awaiting_manual_input:
            raise FunnelStateError("Manual input pending: submit or cancel it first")
        if not value or not value.strip():
            raise InvalidAnswerError("Answer must not be empty")

        if is_manual_answer(value):
            s.awaiting_manual_input = True
            self._log(FunnelStep.ANSWER, manual=True)
            return s.state

        return await self._record_answer(value)

    async def submit_manual(self, text: str) -> FunnelState:
        """Use free text typed by the user as the answer to the current question."""
        self._ensure_usable()
        s = self.session
        if not s.awaiting_manual_input:
            raise FunnelStateError("Manual input was not requested")
        if not text or not text.strip():
            raise InvalidAnswerError("Describe the item or problem")

        s.awaiting_manual_input = False
        return await self._record_answer(text.strip())

    def cancel_manual_input(self) -> None:
        self._ensure_usable()
        self.session.awaiting_manual_input = False

    async def retry(self) -> FunnelState:
        """Re-issue the generation call that failed, with the answers as recorded."""
        self._ensure_usable()
        s = self.session
        if s.state != FunnelState.ERROR:
            raise FunnelStateError(f"Nothing to retry in state {s.state.value}")
        return await self._fetch(s.answer_snapshot())

    def go_back(self) -> bool:
        """Show the previous question. Returns False at the first question."""
        self._ensure_usable()
        s = self.session
        if s.state not in (FunnelState.AWAITING_ANSWER, FunnelState.ERROR):
            raise FunnelStateError(f"Cannot go back in state {s.state.value}")
        if s.current_step <= 0:
            return False
        s.current_step -= 1
        s.awaiting_manual_input = False
        s.last_error = None
        s.state = FunnelState.AWAITING_ANSWER
        return True

    def reset(self) -> None:
        """Redo the funnel from scratch.

        Not allowed while a generation call is in flight; close() is the way out
        of a pending call. A classification still running is ignored.
        """
        self._ensure_usable()
        self.session.clear_funnel()
        self._log(FunnelStep.RESET)

    def close(self) -> None:
        """Caller navigated away. Any in-flight result will be ignored."""
        s = self.session
        if s.closed:
            return
        s.closed = True
        s.epoch += 1
        self._log(FunnelStep.CLOSE)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.session.closed:
            raise FunnelClosedError(f"Funnel {self.session.session_id} is closed")

    def _ensure_usable(self) -> None:
        self._ensure_open()
        if self.session.state == FunnelState.GENERATING:
            raise FunnelBusyError("A generation call is already in flight")

    def _ensure_answerable(self) -> None:
        s = self.session
        if s.state not in (FunnelState.AWAITING_ANSWER, FunnelState.ERROR):
            raise FunnelStateError(f"Cannot answer in state {s.state.value}")
        if s.current_question is None:
            raise FunnelStateError("There is no question to answer")

    def _is_stale(self, epoch: int) -> bool:
        return self.session.closed or self.session.epoch != epoch

    async def _record_answer(self, value: str) -> FunnelState:
        s = self.session
        question = s.current_question
        if question is None:
            raise FunnelStateError("There is no question to answer")

        # Commit before dispatching so the generator sees this answer.
        s.answers[question.id] = value
        snapshot = s.answer_snapshot()
        s.last_error = None
        self._log(FunnelStep.ANSWER, question_id=question.id)

        if not s.is_last_step:
            s.current_step += 1
            s.state = FunnelState.AWAITING_ANSWER
            return s.state

        return await self._fetch(snapshot)

    async def _fetch(self, answers: dict[str, str]) -> FunnelState:
        s = self.session
        epoch = s.epoch
        s.state = FunnelState.GENERATING
        s.generation_calls += 1
        started = time.perf_counter()

        try:
            result = await self.service.generate_questions(
                s.domain,
                answers,
                s.description,
                min_confidence=self.limits.confidence_threshold,
            )
        except asyncio.CancelledError:
            if not self._is_stale(epoch):
                s.state = FunnelState.ERROR
                s.last_error = GENERATION_ERROR_MESSAGE
                logger.warning("Generation cancelled for funnel %s", s.session_id)
            raise
        except GenerationError as e:
            if self._is_stale(epoch):
                logger.info("Discarding failed generation for stale funnel %s", s.session_id)
                return s.state
            s.state = FunnelState.ERROR
            s.last_error = GENERATION_ERROR_MESSAGE
            self._events.log_error(
                FunnelStep.ERROR.value,
                e,
                {"session_id": s.session_id, "timeout": e.timeout, "step": s.current_step},
            )
            return s.state

        if self._is_stale(epoch):
            logger.info("Discarding generation result for stale funnel %s", s.session_id)
            return s.state

        s.last_error = None
        s.confidence = result.confidence
        self._log(
            FunnelStep.GENERATE,
            duration_ms=(time.perf_counter() - started) * 1000,
            candidates=len(result.questions),
        )

        if len(s.history) >= self.limits.max_questions:
            return await self._finish(FinishReason.MAX_QUESTIONS)
        if result.confidence >= self.limits.confidence_threshold:
            return await self._finish(FinishReason.CONFIDENCE)

        room = self.limits.max_questions - len(s.history)
        new_questions = merge_questions(s.history, result.questions)[:room]
        if not new_questions:
            logger.info("Generator produced nothing new below threshold, finishing funnel")
            return await self._finish(FinishReason.STUCK)

        first_new = len(s.history)
        s.history.extend(new_questions)
        s.current_step = first_new
        s.state = FunnelState.AWAITING_ANSWER
        self._log(FunnelStep.MERGE, added=len(new_questions))
        return s.state

    async def _finish(self, reason: FinishReason) -> FunnelState:
        s = self.session
        epoch = s.epoch
        s.state = FunnelState.FINISHED
        s.finish_reason = reason
        s.awaiting_manual_input = False
        self._log(FunnelStep.FINISH, reason=reason.value)

        try:
            classification = await self.finalizer.finalize(
                s.domain,
                s.answer_snapshot(),
                s.description,
                request_id=s.session_id,
            )
        except Exception as e:
            logger.error("Classification finalizer crashed: %s", e, exc_info=True)
            classification = None

        if self._is_stale(epoch):
            return s.state
        s.classification = classification
        self._log(FunnelStep.CLASSIFY, classified=classification is not None)
        return s.state

    def _log(self, step: FunnelStep, duration_ms: float | None = None, **extra: Any) -> None:
        s = self.session
        state = {
            "session_id": s.session_id,
            "domain": s.domain,
            "state": s.state.value,
            "current_step": s.current_step,
            "questions": len(s.history),
            "answers": len(s.answers),
            "confidence": s.confidence,
            **extra,
        }
        self._events.log_step(step.value, state, duration_ms=duration_ms)
