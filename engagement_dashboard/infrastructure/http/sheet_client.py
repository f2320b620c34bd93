"""Async client for published spreadsheet CSV exports."""

from __future__ import annotations

import httpx

from engagement_dashboard.core.config import settings
from engagement_dashboard.core.logger import get_logger
from engagement_dashboard.domain.errors import EmptyOrInvalidPayload, TransportError
from engagement_dashboard.infrastructure.retry import retry_async

from .metrics import FETCH_LATENCY_SECONDS, FETCH_REQUESTS_TOTAL

logger = get_logger("dashboard.sheet_client")

HTML_MARKER = "<html"


def looks_like_html(body: str) -> bool:
    """Sheets answers permission problems with a login page, not an error code."""
    return HTML_MARKER in body.lower()


class SheetClient:
    """Fetches CSV text and classifies failures.

    Raises:
        TransportError: the request failed or returned a non-2xx status.
        EmptyOrInvalidPayload: the request succeeded but the body is empty or
            an HTML page.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        retries: int | None = None,
        base_delay: float | None = None,
    ):
        self.client = client
        self.retries = settings.fetch_retries if retries is None else retries
        self.base_delay = (
            settings.fetch_retry_base_delay_seconds
            if base_delay is None
            else base_delay
        )

    async def fetch_csv(self, url: str) -> str:
        async def _on_retry(attempt: int, exc: BaseException, sleep_for: float):
            logger.warning(
                "sheet_fetch_retry",
                extra={
                    "attempt": attempt,
                    "error": str(exc),
                    "sleep_for": round(sleep_for, 2),
                },
            )

        with FETCH_LATENCY_SECONDS.time():
            try:
                response = await retry_async(
                    lambda: self.client.get(url),
                    retries=self.retries,
                    base_delay=self.base_delay,
                    retry_on=(httpx.TransportError,),
                    on_retry=_on_retry,
                )
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                FETCH_REQUESTS_TOTAL.labels(outcome="transport_error").inc()
                raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            FETCH_REQUESTS_TOTAL.labels(outcome="http_error").inc()
            raise TransportError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )

        body = response.text
        if not body.strip() or looks_like_html(body):
            FETCH_REQUESTS_TOTAL.labels(outcome="invalid_payload").inc()
            raise EmptyOrInvalidPayload(
                "response is not CSV data; check the sheet's sharing permissions"
            )

        FETCH_REQUESTS_TOTAL.labels(outcome="ok").inc()
        return body
