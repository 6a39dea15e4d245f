"""LLM infrastructure module.

Import ``reparai.infrastructure.llm.factory`` directly; it pulls in the Azure
and agent framework SDKs.
"""

from reparai.infrastructure.llm.executor import run_agent_with_format
from reparai.infrastructure.llm.runner import run_formatted_agent

__all__ = [
    "run_agent_with_format",
    "run_formatted_agent",
]
