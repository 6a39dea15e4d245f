"""Diagnostic collaborators and the cached service wrapping them."""

from reparai.services.diagnostics.analyzer import LLMRequestAnalyzer
from reparai.services.diagnostics.generator import LLMQuestionGenerator
from reparai.services.diagnostics.service import DiagnosticService

__all__ = [
    "DiagnosticService",
    "LLMQuestionGenerator",
    "LLMRequestAnalyzer",
]
