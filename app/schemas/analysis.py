from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictStr, ValidationError
from pydantic.alias_generators import to_camel

from app.core.errors import SchemaViolationError

MAX_TEXT_CHARS = 50000


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    resume_text: str = Field(default="", max_length=MAX_TEXT_CHARS)
    job_description: str = Field(default="", max_length=MAX_TEXT_CHARS)


class AnalysisReport(BaseModel):
    """Structured critique returned by the analysis model.

    Validation is strict: the score must be a JSON number inside [0, 100] and
    every list must hold strings only. Anything else is rejected as a whole.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    ats_score: StrictFloat = Field(ge=0, le=100)
    summary: StrictStr
    ats_feedback: list[StrictStr]
    strengths: list[StrictStr]
    weaknesses: list[StrictStr]
    job_description_match: list[StrictStr]

    @classmethod
    def from_inner_json(cls, text: str) -> "AnalysisReport":
        try:
            return cls.model_validate_json(text)
        except ValidationError as exc:
            fields = sorted({".".join(str(part) for part in err["loc"]) or "<root>" for err in exc.errors()})
            raise SchemaViolationError(
                f"The analysis service returned a malformed report (fields: {', '.join(fields)})."
            ) from exc

    def to_inner_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    report: AnalysisReport
    model: str
    generated_at: datetime


class ExtractTextResponse(BaseModel):
    filename: str
    text: str
    page_count: int = Field(ge=0)
    characters: int = Field(ge=0)
    warnings: list[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    detail: ErrorDetail
