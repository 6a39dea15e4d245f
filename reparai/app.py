"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reparai.api.routers import api_router
from reparai.config.settings import Settings, get_settings
from reparai.infrastructure.logging.logger import setup_logging

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate required configuration at startup."""
    models = (settings.generation_agent_model, settings.analysis_agent_model)
    uses_claude = any("claude" in m.lower() for m in models)
    uses_azure = any("claude" not in m.lower() for m in models)
    if uses_claude and not settings.anthropic_api_key:
        logger.warning("A Claude model is configured but anthropic_api_key is empty")
    if uses_azure and not settings.azure_ai_project_endpoint:
        logger.warning("An Azure model is configured but azure_ai_project_endpoint is empty")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info("Starting %s", settings.app_name)
    _validate_startup_config(settings)
    logger.info(
        "Funnel limits: threshold=%.2f max_questions=%d",
        settings.funnel_confidence_threshold,
        settings.funnel_max_questions,
    )

    yield
    logger.info("Shutting down %s", settings.app_name)
    try:
        from reparai.infrastructure.llm.factory import close_shared_credential

        await close_shared_credential()
        logger.info("Shared async credential closed")
    except Exception as e:
        logger.error("Error closing shared credential: %s", e, exc_info=True)


app = FastAPI(
    title=settings.app_name,
    description="AI diagnostic funnel that turns a repair complaint into a service taxonomy",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")
