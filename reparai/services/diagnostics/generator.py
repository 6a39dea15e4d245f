"""LLM-backed question generator."""

import logging
from typing import Any

from pydantic import BaseModel

from reparai.config.prompts import (
    build_question_generation_input,
    build_question_generation_system_prompt,
)
from reparai.config.settings import Settings
from reparai.funnel.models import GenerationRequest, GenerationResponse
from reparai.infrastructure.llm.runner import run_formatted_agent
from reparai.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)


class LLMQuestionGenerator:
    """Asks the generation model for the next diagnostic question."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def __call__(self, request: GenerationRequest) -> dict[str, Any]:
        response = await run_formatted_agent(
            self.settings,
            name="QuestionGenerator",
            instructions=build_question_generation_system_prompt(
                request.domain, request.min_confidence
            ),
            message=build_question_generation_input(
                request.domain, request.answers, request.user_text
            ),
            response_format=GenerationResponse,
            model=self.settings.generation_agent_model,
            max_tokens=self.settings.generation_max_tokens,
            temperature=self.settings.generation_temperature,
        )
        if isinstance(response, BaseModel):
            return response.model_dump()

        logger.warning("Question generator output did not validate, re-parsing raw text")
        data = JSONParser.extract_json(response)
        if not data:
            return {"error": "Question generator returned no JSON"}
        return data
