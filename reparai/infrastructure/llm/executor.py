"""
Agent executor for running agents in isolation.
"""
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from reparai.utils.json_parser import JSONParser
from reparai.utils.retry import run_with_retry

logger = logging.getLogger(__name__)


def _coerce(result: Any, response_format: type[BaseModel]) -> BaseModel | str:
    """Turn an agent run result into *response_format*, or its raw text."""
    value = getattr(result, "value", None)
    if isinstance(value, response_format):
        return value

    text = getattr(result, "text", None)
    if text is None:
        text = result if isinstance(result, str) else ""
    if not text:
        logger.warning("No text received from agent for %s", response_format.__name__)
        return ""

    json_data = JSONParser.extract_json(text)
    if not json_data:
        logger.warning(
            "Could not extract JSON for %s. Full text (first 500 chars): %s",
            response_format.__name__,
            text[:500],
        )
        return text
    try:
        return response_format.model_validate(json_data)
    except ValidationError as e:
        logger.warning("Failed to parse response as %s: %s", response_format.__name__, e)
        return text


async def run_agent_with_format(
    agent: Any,
    input_text: str,
    response_format: type[BaseModel],
    *,
    max_retries: int = 2,
    initial_delay: float = 2.0,
    backoff_factor: float = 2.0,
) -> BaseModel | str:
    """
    Execute agent with structured output.

    Args:
        agent: Agent instance exposing ``async run(text, response_format=...)``
        input_text: Input text for the agent
        response_format: Pydantic BaseModel class for structured output

    Returns:
        Pydantic model instance when the output validates, otherwise the raw text
    """

    async def _execute_agent() -> BaseModel | str:
        result = await agent.run(input_text, response_format=response_format)
        return _coerce(result, response_format)

    return await run_with_retry(
        _execute_agent,
        max_retries=max_retries,
        initial_delay=initial_delay,
        backoff_factor=backoff_factor,
    )
