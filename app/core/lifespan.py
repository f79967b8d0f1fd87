from contextlib import asynccontextmanager
import logging

import httpx

from app.ai.factory import get_ai_client
from app.core.config import settings
from app.parsing.pdf import PdfTextExtractor
from app.services.analysis_service import AnalysisOrchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.analysis_timeout_s))
    app.state.analysis_orchestrator = AnalysisOrchestrator(
        generator=get_ai_client(http_client),
        extractor=PdfTextExtractor(),
    )
    logger.info("analysis_service_ready model=%s", app.state.analysis_orchestrator.model)
    try:
        yield
    finally:
        app.state.analysis_orchestrator = None
        await http_client.aclose()
