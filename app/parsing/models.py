from __future__ import annotations

from pydantic import BaseModel, Field


class ExtractedDocument(BaseModel):
    text: str
    page_count: int = Field(default=0, ge=0)
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())
