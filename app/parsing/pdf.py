from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader

from app.core.errors import CorruptDocumentError
from .models import ExtractedDocument

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


class PdfTextExtractor:
    """Extracts page text from PDF bytes.

    Instances are constructed explicitly and handed to the services that need
    them; there is no module level reader state.
    """

    def __init__(self, *, max_pages: int = 50, page_separator: str = "\n"):
        self._max_pages = max_pages
        self._page_separator = page_separator

    @staticmethod
    def looks_like_pdf(content: bytes) -> bool:
        return PDF_MAGIC in content[:1024]

    def extract_text(self, content: bytes) -> ExtractedDocument:
        if not content or not self.looks_like_pdf(content):
            raise CorruptDocumentError("The uploaded file is not a valid PDF.")

        warnings: list[str] = []
        try:
            reader = PdfReader(BytesIO(content))
            if reader.is_encrypted and not reader.decrypt(""):
                raise CorruptDocumentError("The PDF is password protected. Please upload an unlocked copy.")

            page_count = len(reader.pages)
            text_parts: list[str] = []
            for index, page in enumerate(reader.pages, start=1):
                if index > self._max_pages:
                    warnings.append(f"Only the first {self._max_pages} pages were read.")
                    break
                page_text = (page.extract_text() or "").strip()
                if page_text:
                    text_parts.append(page_text)
        except CorruptDocumentError:
            raise
        except Exception as exc:
            logger.warning("pdf_extract_failed bytes=%s: %s", len(content), exc)
            raise CorruptDocumentError() from exc

        if not text_parts:
            warnings.append("No extractable text found in PDF.")
        return ExtractedDocument(
            text=self._page_separator.join(text_parts),
            page_count=page_count,
            warnings=warnings,
        )
