import httpx

from app.ai.config import load_ai_config
from app.ai.http_client import ResilientJsonClient, RetryPolicy
from app.ai.providers.gemini_provider import GeminiProvider
from app.ai.types import JsonGenerator
from app.core.config import settings


def default_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_retries=settings.analysis_max_retries,
        initial_delay_s=settings.analysis_initial_delay_ms / 1000.0,
    )


def get_ai_client(http_client: httpx.AsyncClient) -> JsonGenerator:
    cfg = load_ai_config()
    json_client = ResilientJsonClient(http_client, policy=default_retry_policy())

    if cfg.provider == "gemini":
        return GeminiProvider(cfg, json_client)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
