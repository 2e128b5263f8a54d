# app/infrastructure/external/gst_insights_client.py
"""
GST insights worker client.

Thin async wrapper around the third-party worker that proxies the GST
public APIs:

  GET /getGSTStatus/{gstin}
  GET /getGSTDetailsUsingGST/{gstin}
  GET /getGSTDetailsUsingPAN/{pan}
  GET /getGSTReturnFilingStatusSpecificYear/{gstin}/{apiYear}

plus the supplier verification proxy (GET {verify_base}/{gstin}).

Responses are returned as parsed JSON; shaping and error messages for the
user are handled in ``app.domain.services.gst_insights``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import quote

import httpx

from app.core.config import settings
from app.domain.errors import ExternalServiceError

logger = logging.getLogger("gst_insights_client")


class GstInsightsError(ExternalServiceError):
    """Raised when the GST insights worker fails or answers with an error.

    ``status_code`` is 0 when no HTTP response was received at all.
    """


class GstInsightsClient:
    def __init__(
        self,
        base_url: str | None = None,
        verify_base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base = (base_url or settings.GST_INSIGHTS_BASE_URL).rstrip("/")
        self.verify_base = (verify_base_url or settings.GSTIN_VERIFY_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GST_INSIGHTS_TIMEOUT
        # injectable for tests (httpx.MockTransport)
        self.transport = transport

    async def _get(self, url: str) -> Dict[str, Any]:
        logger.info("GST insights GET %s", url)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.get(url, headers={"Accept": "application/json"})
            except httpx.TimeoutException as exc:
                logger.error("GST insights timeout: %s", url)
                raise GstInsightsError("GST insights API timeout") from exc
            except httpx.HTTPError as exc:
                logger.error("GST insights transport error: %s (%s)", url, exc)
                raise GstInsightsError(f"GST insights API unreachable: {exc}") from exc

        try:
            data = r.json()
        except ValueError:
            data = None

        if r.is_error:
            body = data if isinstance(data, dict) else {}
            logger.error("GST insights HTTP error: %s -> %d %s", url, r.status_code, body)
            raise GstInsightsError(
                body.get("message") or f"GST insights API error: {r.status_code}",
                status_code=r.status_code,
                response=body,
            )

        if not isinstance(data, dict):
            logger.warning("GST insights returned non-JSON body: %s (status=%d, body=%.200s)", url, r.status_code, r.text)
            raise GstInsightsError(
                "GST insights API returned an unexpected body",
                status_code=r.status_code,
            )

        return data

    # ----------------------------------------------------------------
    # Lookups
    # ----------------------------------------------------------------

    async def get_gst_status(self, gstin: str) -> Dict[str, Any]:
        return await self._get(f"{self.base}/getGSTStatus/{quote(gstin)}")

    async def get_details_by_gstin(self, gstin: str) -> Dict[str, Any]:
        return await self._get(f"{self.base}/getGSTDetailsUsingGST/{quote(gstin)}")

    async def get_details_by_pan(self, pan: str) -> Dict[str, Any]:
        return await self._get(f"{self.base}/getGSTDetailsUsingPAN/{quote(pan)}")

    async def get_filing_status(self, gstin: str, api_year: str) -> Dict[str, Any]:
        """Raw filing events for one financial year (``api_year`` like ``2024-2025``)."""
        return await self._get(
            f"{self.base}/getGSTReturnFilingStatusSpecificYear/{quote(gstin)}/{quote(api_year)}"
        )

    async def verify_gstin(self, gstin: str) -> Dict[str, Any]:
        return await self._get(f"{self.verify_base}/{quote(gstin)}")
