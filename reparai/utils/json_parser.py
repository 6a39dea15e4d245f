"""
JSON Parser utility for extracting JSON from LLM responses.
"""
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)
_ANY_OBJECT = re.compile(r"(\{.*\})", re.DOTALL)


class JSONParser:
    """Helper class to extract clean JSON from LLM responses."""

    @staticmethod
    def _try_load(text: str) -> dict[str, Any] | None:
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def extract_json(text: str) -> dict[str, Any]:
        """Attempts to extract a JSON object from text.

        Tries the raw text, then a fenced ```json block, then the outermost
        braces. Returns an empty dict when nothing parses.
        """
        if not text:
            return {}

        data = JSONParser._try_load(text.strip())
        if data is not None:
            return data

        for pattern in (_CODE_BLOCK, _ANY_OBJECT):
            match = pattern.search(text)
            if match:
                data = JSONParser._try_load(match.group(1))
                if data is not None:
                    return data

        logger.warning("JSONParser: Could not extract JSON from text, returning empty dict")
        return {}
