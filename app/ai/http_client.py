"""JSON-over-HTTP client with bounded exponential backoff.

Only transport failures and non-2xx statuses are retried. A 2xx body that is
not JSON is reported immediately as a schema violation.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

import httpx

from app.core.errors import SchemaViolationError, TransportError

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_s: float = 1.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_s < 0:
            raise ValueError("initial_delay_s must be >= 0")


@dataclass
class RetryState:
    attempts_remaining: int
    current_delay: float
    attempts: int = 0

    @classmethod
    def start(cls, policy: RetryPolicy) -> "RetryState":
        return cls(attempts_remaining=policy.max_retries, current_delay=policy.initial_delay_s)


def _redact_url(url: str) -> str:
    # API keys travel in the query string.
    return url.split("?", 1)[0]


class ResilientJsonClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        policy: RetryPolicy | None = None,
        sleep: SleepFunc | None = None,
    ):
        self._client = client
        self._policy = policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep

    async def send(
        self,
        url: str,
        payload: Any,
        *,
        policy: RetryPolicy | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        active = policy or self._policy
        state = RetryState.start(active)
        safe_url = _redact_url(url)

        while True:
            state.attempts += 1
            last_status: int | None = None
            try:
                response = await self._client.post(url, json=payload, headers=dict(headers or {}))
                if response.is_success:
                    return self._decode(response, safe_url)
                last_status = response.status_code
                failure: Exception = httpx.HTTPStatusError(
                    f"HTTP {response.status_code} from {safe_url}",
                    request=response.request,
                    response=response,
                )
            except httpx.HTTPError as exc:
                failure = exc

            if state.attempts_remaining <= 0:
                logger.error(
                    "analysis_request_failed url=%s attempts=%s status=%s: %s",
                    safe_url,
                    state.attempts,
                    last_status,
                    failure,
                )
                raise TransportError(
                    status_code=last_status,
                    attempts=state.attempts,
                ) from failure

            logger.warning(
                "analysis_request_retry url=%s attempt=%s status=%s delay_s=%.2f: %s",
                safe_url,
                state.attempts,
                last_status,
                state.current_delay,
                failure,
            )
            await self._sleep(state.current_delay)
            state.current_delay *= active.multiplier
            state.attempts_remaining -= 1

    @staticmethod
    def _decode(response: httpx.Response, safe_url: str) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SchemaViolationError(
                f"The analysis service at {safe_url} returned a non-JSON body."
            ) from exc
