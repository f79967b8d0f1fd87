"""Failure kinds surfaced by resume analysis.

Every error carries a stable ``code`` for API clients and a user-facing
message. The HTTP layer maps each kind to its own status code.
"""

from __future__ import annotations


class AnalysisError(RuntimeError):
    code = "analysis_failed"
    status_code = 500
    default_message = "The analysis could not be completed. Please try again."

    def __init__(self, message: str | None = None, *, code: str | None = None):
        super().__init__(message or self.default_message)
        if code:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)


class InvalidInputError(AnalysisError):
    code = "invalid_input"
    status_code = 422
    default_message = "Please paste your resume text or upload a PDF before analyzing."


class CorruptDocumentError(AnalysisError):
    code = "corrupt_document"
    status_code = 400
    default_message = "Failed to process the PDF. It may be corrupt or encrypted."


class TransportError(AnalysisError):
    code = "upstream_unavailable"
    status_code = 503
    default_message = "The analysis service is unreachable right now. Please try again in a minute."

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.upstream_status = status_code
        self.attempts = attempts


class SchemaViolationError(AnalysisError):
    code = "upstream_invalid_response"
    status_code = 502
    default_message = "The analysis service returned an unexpected response. Please try again."


class AnalysisConfigError(AnalysisError):
    code = "not_configured"
    status_code = 503
    default_message = "Resume analysis is not configured on this server."
