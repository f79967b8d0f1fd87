from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.parsing.pdf import PdfTextExtractor
from app.schemas.analysis import (
    MAX_TEXT_CHARS,
    AnalysisRequest,
    AnalysisResponse,
    ErrorResponse,
    ExtractTextResponse,
)
from app.services.analysis_service import AnalysisOrchestrator

router = APIRouter()

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Corrupt or unreadable PDF"},
    422: {"model": ErrorResponse, "description": "Missing resume text"},
    502: {"model": ErrorResponse, "description": "Malformed response from the analysis service"},
    503: {"model": ErrorResponse, "description": "Analysis service unavailable or not configured"},
}


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    orchestrator = getattr(request.app.state, "analysis_orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "not_ready", "message": "The analysis service is starting up. Please retry shortly."},
        )
    return orchestrator


async def _read_pdf_upload(file: UploadFile) -> bytes:
    filename = file.filename or "uploaded-file"
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if ext != "pdf" and content_type not in PDF_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "unsupported_file", "message": "Please upload a valid PDF file."},
        )

    max_bytes = settings.max_upload_bytes
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={
                    "code": "file_too_large",
                    "message": f"File too large. Maximum allowed size is {settings.max_upload_mb} MB.",
                },
            )
        chunks.append(chunk)
    content = b"".join(chunks)

    if not PdfTextExtractor.looks_like_pdf(content):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "unsupported_file", "message": "Please upload a valid PDF file."},
        )
    return content


def _analysis_response(orchestrator: AnalysisOrchestrator, report) -> AnalysisResponse:
    return AnalysisResponse(
        report=report,
        model=orchestrator.model,
        generated_at=datetime.now(timezone.utc),
    )


@router.post("/analysis", response_model=AnalysisResponse, responses=ERROR_RESPONSES)
@rate_limit()
async def analyze_resume(
    request: Request,
    payload: AnalysisRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    _ = request
    report = await orchestrator.analyze(payload)
    return _analysis_response(orchestrator, report)


@router.post("/analysis/pdf", response_model=AnalysisResponse, responses=ERROR_RESPONSES)
@rate_limit()
async def analyze_resume_pdf(
    request: Request,
    file: UploadFile = File(...),
    job_description: str = Form(default="", max_length=MAX_TEXT_CHARS),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    _ = request
    content = await _read_pdf_upload(file)
    report = await orchestrator.analyze_document(content, job_description=job_description)
    return _analysis_response(orchestrator, report)


@router.post("/analysis/extract-text", response_model=ExtractTextResponse, responses=ERROR_RESPONSES)
@rate_limit()
async def extract_resume_text(
    request: Request,
    file: UploadFile = File(...),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    _ = request
    content = await _read_pdf_upload(file)
    document = await orchestrator.extract_text(content)
    return ExtractTextResponse(
        filename=file.filename or "uploaded-file",
        text=document.text,
        page_count=document.page_count,
        characters=len(document.text),
        warnings=document.warnings,
    )
