from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import time

from app.ai.types import JsonGenerator
from app.core.errors import InvalidInputError
from app.parsing.models import ExtractedDocument
from app.parsing.pdf import PdfTextExtractor
from app.prompt.resume_analysis import build_analysis_prompt
from app.schemas.analysis import MAX_TEXT_CHARS, AnalysisReport, AnalysisRequest

logger = logging.getLogger("app.analysis")


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


class AnalysisOrchestrator:
    """Runs one resume analysis from validated input to a complete report.

    The call is atomic for the caller: it returns a fully validated
    ``AnalysisReport`` or raises one of the ``AnalysisError`` kinds.
    """

    def __init__(self, generator: JsonGenerator, extractor: PdfTextExtractor):
        self._generator = generator
        self._extractor = extractor

    @property
    def model(self) -> str:
        return self._generator.model

    async def analyze(self, request: AnalysisRequest) -> AnalysisReport:
        if not request.resume_text.strip():
            raise InvalidInputError()

        started = time.perf_counter()
        prompt, schema = build_analysis_prompt(request.resume_text, request.job_description)
        inner_text = await self._generator.generate_json(prompt, schema)
        report = AnalysisReport.from_inner_json(inner_text)

        logger.info(
            json.dumps(
                {
                    "event": "analysis_completed",
                    "model": self.model,
                    "resume_len": len(request.resume_text),
                    "resume_hash": _short_hash(request.resume_text),
                    "job_description_len": len(request.job_description),
                    "ats_score": report.ats_score,
                    "latency_ms": int((time.perf_counter() - started) * 1000),
                }
            )
        )
        return report

    async def extract_text(self, content: bytes) -> ExtractedDocument:
        return await asyncio.to_thread(self._extractor.extract_text, content)

    async def analyze_document(self, content: bytes, *, job_description: str = "") -> AnalysisReport:
        if len(job_description) > MAX_TEXT_CHARS:
            raise InvalidInputError(
                f"The job description is longer than {MAX_TEXT_CHARS} characters. Please shorten it."
            )
        document = await self.extract_text(content)
        if not document.has_text:
            raise InvalidInputError(
                "No text could be extracted from the PDF. Try pasting the resume text instead."
            )
        if len(document.text) > MAX_TEXT_CHARS:
            raise InvalidInputError(
                f"The PDF text is longer than {MAX_TEXT_CHARS} characters. Please shorten the resume."
            )
        return await self.analyze(
            AnalysisRequest(resume_text=document.text, job_description=job_description)
        )
