from __future__ import annotations

from typing import Any
from urllib.parse import quote

from app.ai.config import AIConfig
from app.ai.http_client import ResilientJsonClient
from app.core.errors import AnalysisConfigError, SchemaViolationError


def build_generate_content_payload(prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
    }


def extract_candidate_text(envelope: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` from a generateContent reply."""
    try:
        candidates = envelope["candidates"]
        if not isinstance(candidates, list) or not candidates:
            raise TypeError("candidates must be a non-empty list")
        parts = candidates[0]["content"]["parts"]
        if not isinstance(parts, list) or not parts:
            raise TypeError("parts must be a non-empty list")
        text = parts[0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise SchemaViolationError(
            "The analysis service response did not contain any generated content."
        ) from exc
    if not isinstance(text, str):
        raise SchemaViolationError("The analysis service returned non-text content.")
    return text


class GeminiProvider:
    def __init__(self, config: AIConfig, client: ResilientJsonClient):
        self._config = config
        self._client = client
        self.model = config.model

    def endpoint_url(self) -> str:
        cfg = self._config
        return (
            f"{cfg.base_url}/{cfg.api_version}/models/{quote(cfg.model, safe='.-_')}:generateContent"
            f"?key={quote(cfg.api_key, safe='')}"
        )

    async def generate_json(self, prompt: str, schema: dict[str, Any]) -> str:
        if not self._config.api_key:
            raise AnalysisConfigError("GEMINI_API_KEY is not configured.")
        envelope = await self._client.send(
            self.endpoint_url(),
            build_generate_content_payload(prompt, schema),
            headers={"Content-Type": "application/json"},
        )
        return extract_candidate_text(envelope)
