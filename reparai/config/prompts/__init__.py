"""System prompts for the diagnostic agents."""

from reparai.config.prompts.analysis import ANALYSIS_SYSTEM_PROMPT, build_analysis_input
from reparai.config.prompts.questions import (
    build_question_generation_input,
    build_question_generation_system_prompt,
)

__all__ = [
    "ANALYSIS_SYSTEM_PROMPT",
    "build_analysis_input",
    "build_question_generation_input",
    "build_question_generation_system_prompt",
]
