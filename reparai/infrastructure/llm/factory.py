"""Agent factory for the diagnostic agents.

Claude models go through the Anthropic client; every other model name is
treated as an Azure AI Foundry deployment.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from agent_framework.anthropic import AnthropicClient
from agent_framework_azure_ai import AzureAIAgentClient
from azure.identity.aio import DefaultAzureCredential
from pydantic import BaseModel

from reparai.config.settings import Settings

logger = logging.getLogger(__name__)

_credential: DefaultAzureCredential | None = None


def get_shared_credential() -> DefaultAzureCredential:
    """Azure credential reused by every Foundry client in the process."""
    global _credential
    if _credential is None:
        _credential = DefaultAzureCredential()
    return _credential


async def close_shared_credential() -> None:
    """Release the shared credential; called from the app lifespan."""
    global _credential
    if _credential is not None:
        await _credential.close()
        _credential = None


def is_anthropic_model(model: str) -> bool:
    return "claude" in model.lower()


def _agent_kwargs(
    name: str,
    instructions: str,
    max_tokens: int,
    temperature: float,
    response_format: type[BaseModel] | None,
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "name": name,
        "instructions": instructions,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if response_format is not None:
        kwargs["response_format"] = response_format
    return kwargs


@asynccontextmanager
async def open_agent(
    settings: Settings,
    name: str,
    instructions: str,
    model: str,
    *,
    max_tokens: int = 1024,
    temperature: float = 0.0,
    response_format: type[BaseModel] | None = None,
) -> AsyncIterator[Any]:
    """
    Yield a ready agent for *model*, closing the Azure client afterwards.

    Usage:
        async with open_agent(settings, "QuestionGenerator", prompt, "gpt-4o-mini",
                              response_format=GenerationResponse) as agent:
            response = await run_agent_with_format(agent, message, GenerationResponse)
    """
    kwargs = _agent_kwargs(name, instructions, max_tokens, temperature, response_format)

    if is_anthropic_model(model):
        logger.debug("Creating Anthropic agent '%s' with model %s", name, model)
        client = AnthropicClient(model_id=model, api_key=settings.anthropic_api_key)
        yield client.create_agent(**kwargs)
        return

    logger.debug("Creating Azure AI agent '%s' on deployment %s", name, model)
    async with AzureAIAgentClient(
        project_endpoint=settings.azure_ai_project_endpoint,
        model_deployment_name=model,
        async_credential=get_shared_credential(),
    ) as client:
        yield client.create_agent(**kwargs)
