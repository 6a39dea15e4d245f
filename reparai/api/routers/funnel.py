"""Diagnostic funnel endpoints."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from reparai.api.dependencies import (
    get_analysis_cache,
    get_diagnostic_service,
    get_session_store,
)
from reparai.api.models import (
    AnswerRequest,
    CreateFunnelRequest,
    FunnelView,
    ManualInputRequest,
    funnel_view,
)
from reparai.config.settings import Settings, get_settings
from reparai.exceptions import (
    FunnelBusyError,
    FunnelClosedError,
    FunnelStateError,
    InvalidAnswerError,
    SessionNotFoundError,
)
from reparai.funnel.controller import FunnelController
from reparai.funnel.finalizer import ClassificationFinalizer
from reparai.funnel.session import FunnelLimits, FunnelSession
from reparai.funnel.session_store import FunnelSessionStore
from reparai.infrastructure.cache.question_cache import AnalysisCache
from reparai.services.diagnostics import DiagnosticService

logger = logging.getLogger(__name__)

router = APIRouter()


@contextmanager
def _funnel_errors() -> Iterator[None]:
    """Map funnel exceptions to HTTP errors."""
    try:
        yield
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except FunnelClosedError as e:
        raise HTTPException(status_code=410, detail=str(e)) from e
    except FunnelBusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except FunnelStateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except InvalidAnswerError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _get_controller(store: FunnelSessionStore, session_id: str) -> FunnelController:
    with _funnel_errors():
        return store.get(session_id)


@router.post("", response_model=FunnelView, status_code=201)
async def create_funnel(
    request: CreateFunnelRequest,
    settings: Settings = Depends(get_settings),  # noqa: B008
    service: DiagnosticService = Depends(get_diagnostic_service),  # noqa: B008
    analysis_cache: AnalysisCache = Depends(get_analysis_cache),  # noqa: B008
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    """Open a funnel for a domain and fetch its first question."""
    store.cleanup_expired()
    session = FunnelSession(domain=request.domain, description=request.description.strip())
    controller = FunnelController(
        session,
        service,
        ClassificationFinalizer(service, analysis_cache),
        FunnelLimits.for_domain(settings, request.domain),
    )
    store.add(controller)
    logger.info("Opened funnel %s for domain=%s", session.session_id, session.domain)
    with _funnel_errors():
        await controller.start()
    return funnel_view(controller)


@router.get("/{session_id}", response_model=FunnelView)
async def get_funnel(
    session_id: str,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    return funnel_view(_get_controller(store, session_id))


@router.post("/{session_id}/answer", response_model=FunnelView)
async def answer_question(
    session_id: str,
    request: AnswerRequest,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    """Answer the current question; may trigger the next generation call."""
    controller = _get_controller(store, session_id)
    with _funnel_errors():
        await controller.answer(request.value)
    return funnel_view(controller)


@router.post("/{session_id}/manual", response_model=FunnelView)
async def submit_manual_input(
    session_id: str,
    request: ManualInputRequest,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    controller = _get_controller(store, session_id)
    with _funnel_errors():
        await controller.submit_manual(request.text)
    return funnel_view(controller)


@router.post("/{session_id}/manual/cancel", response_model=FunnelView)
async def cancel_manual_input(
    session_id: str,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    controller = _get_controller(store, session_id)
    with _funnel_errors():
        controller.cancel_manual_input()
    return funnel_view(controller)


@router.post("/{session_id}/retry", response_model=FunnelView)
async def retry_generation(
    session_id: str,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    """Retry after a failed generation call, or a failed first fetch."""
    controller = _get_controller(store, session_id)
    with _funnel_errors():
        if controller.session.history:
            await controller.retry()
        else:
            await controller.start()
    return funnel_view(controller)


@router.post("/{session_id}/back", response_model=FunnelView)
async def previous_question(
    session_id: str,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    controller = _get_controller(store, session_id)
    with _funnel_errors():
        controller.go_back()
    return funnel_view(controller)


@router.post("/{session_id}/reset", response_model=FunnelView)
async def redo_funnel(
    session_id: str,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, Any]:
    """Clear every answer and question and start the funnel again."""
    controller = _get_controller(store, session_id)
    with _funnel_errors():
        controller.reset()
        await controller.start()
    return funnel_view(controller)


@router.delete("/{session_id}")
async def close_funnel(
    session_id: str,
    store: FunnelSessionStore = Depends(get_session_store),  # noqa: B008
) -> dict[str, str]:
    """Discard the funnel; a generation call still in flight is ignored."""
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Funnel session {session_id} not found")
    return {"message": "Funnel closed", "status": "success"}
