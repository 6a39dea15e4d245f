"""LLM-backed request analyzer producing the 3D taxonomy."""

import logging
from typing import Any

from pydantic import BaseModel

from reparai.config.prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_input
from reparai.config.settings import Settings
from reparai.funnel.models import AnalysisRequest, ClassificationResult
from reparai.infrastructure.llm.runner import run_formatted_agent
from reparai.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)


class LLMRequestAnalyzer:
    """Classifies a finished funnel. Provider matching is not done here."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def __call__(self, request: AnalysisRequest) -> dict[str, Any]:
        response = await run_formatted_agent(
            self.settings,
            name="RequestAnalyzer",
            instructions=ANALYSIS_SYSTEM_PROMPT,
            message=build_analysis_input(request.category, request.answers, request.user_text),
            response_format=ClassificationResult,
            model=self.settings.analysis_agent_model,
            max_tokens=self.settings.analysis_max_tokens,
            temperature=self.settings.analysis_temperature,
        )
        if isinstance(response, BaseModel):
            analysis = response.model_dump()
        else:
            logger.warning("Request analyzer output did not validate, re-parsing raw text")
            analysis = JSONParser.extract_json(response)
            if not analysis:
                return {"error": "Request analyzer returned no JSON"}

        analysis.setdefault("domain", request.category)
        return {"analysis": analysis, "providers": []}
