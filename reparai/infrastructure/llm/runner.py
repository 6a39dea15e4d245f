"""Shared LLM runner for the diagnostic agents.

Lazy imports keep the agent framework and Azure SDKs out of the import path
until an agent actually runs.
"""

from typing import Any, NamedTuple

from pydantic import BaseModel

from reparai.config.settings import Settings


class _LLMDeps(NamedTuple):
    """Lazily-resolved LLM factory and executor functions."""

    open_agent: Any
    run_agent_with_format: Any


def _lazy_imports() -> _LLMDeps:
    from reparai.infrastructure.llm.executor import run_agent_with_format
    from reparai.infrastructure.llm.factory import open_agent

    return _LLMDeps(open_agent=open_agent, run_agent_with_format=run_agent_with_format)


async def run_formatted_agent(
    settings: Settings,
    name: str,
    instructions: str,
    message: str,
    *,
    response_format: type[BaseModel],
    model: str,
    max_tokens: int = 1024,
    temperature: float = 0.0,
) -> BaseModel | str:
    """Run an agent and return its response parsed into *response_format*.

    Falls back to the raw text when the model output does not validate.
    """
    llm = _lazy_imports()
    async with llm.open_agent(
        settings,
        name,
        instructions,
        model,
        max_tokens=max_tokens,
        temperature=temperature,
        response_format=response_format,
    ) as agent:
        return await llm.run_agent_with_format(
            agent,
            message,
            response_format,
            max_retries=settings.llm_max_retries,
            initial_delay=settings.llm_retry_delay,
            backoff_factor=settings.retry_backoff_factor,
        )
