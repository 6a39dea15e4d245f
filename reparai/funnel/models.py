"""Diagnostic funnel data models, validated at every collaborator boundary."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from reparai.config.constants import (
    ISSUE_TAGS_LIMIT,
    SUMMARY_FOR_PROVIDER_LIMIT,
    QuestionType,
)


class QuestionOption(BaseModel):
    """A selectable answer for a diagnostic question."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class DiagnosticQuestion(BaseModel):
    """A question produced by the generator and shown to the user."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique within a funnel session")
    text: str = Field(..., description="Prompt shown to the user")
    type: QuestionType = Field(..., description="boolean, select or tri")
    options: list[QuestionOption] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question text must not be blank")
        return v

    @model_validator(mode="after")
    def validate_select_options(self) -> "DiagnosticQuestion":
        if self.type == QuestionType.SELECT and not self.options:
            raise ValueError(f"select question '{self.id}' must have options")
        return self


class GenerationRequest(BaseModel):
    """Payload sent to the question generator."""

    domain: str
    answers: dict[str, str] = Field(default_factory=dict)
    user_text: str | None = None
    min_confidence: float = Field(..., ge=0.0, le=1.0)


class GenerationResponse(BaseModel):
    """Questions and confidence returned by the question generator."""

    questions: list[DiagnosticQuestion] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)


class ClassificationResult(BaseModel):
    """Three-dimensional taxonomy position plus provider-facing summary."""

    domain: str
    asset_type: str
    service_type: str
    issue_tags: list[str] = Field(default_factory=list)
    problem_guess: str = ""
    summary_for_provider: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)

    @field_validator("issue_tags")
    @classmethod
    def normalize_issue_tags(cls, v: list[str]) -> list[str]:
        tags: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags[:ISSUE_TAGS_LIMIT]

    @field_validator("summary_for_provider")
    @classmethod
    def limit_summary(cls, v: str) -> str:
        return v.strip()[:SUMMARY_FOR_PROVIDER_LIMIT]


class AnalysisRequest(BaseModel):
    """Payload sent to the request analyzer."""

    request_id: str | None = None
    category: str
    answers: dict[str, str] = Field(default_factory=dict)
    user_text: str | None = None
    lat: float | None = None
    lng: float | None = None


class AnalysisResponse(BaseModel):
    """Classification returned by the request analyzer."""

    analysis: ClassificationResult
    providers: list[dict[str, Any]] = Field(default_factory=list)
