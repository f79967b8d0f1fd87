import os
from dataclasses import dataclass

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_API_VERSION = "v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str
    base_url: str
    api_version: str


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    model = os.getenv("AI_MODEL", DEFAULT_GEMINI_MODEL).strip()
    api_key = (os.getenv("GEMINI_API_KEY") or "").strip()
    if _looks_like_placeholder(api_key):
        api_key = ""
    base_url = (os.getenv("GEMINI_BASE_URL") or DEFAULT_GEMINI_BASE_URL).strip().rstrip("/")
    api_version = (os.getenv("GEMINI_API_VERSION") or DEFAULT_GEMINI_API_VERSION).strip().strip("/")
    return AIConfig(
        provider=provider,
        model=model,
        api_key=api_key,
        base_url=base_url,
        api_version=api_version,
    )
