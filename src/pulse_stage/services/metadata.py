"""Client for the external link-metadata extraction service.

The service is iframely-compatible: a ``GET`` with the target ``url`` as a
query parameter returns ``meta`` (title, description, site, canonical) and
``links`` (icon, thumbnail). When the service cannot extract anything it still
answers, but populates its own ``status``/``error`` fields; those are surfaced
as :class:`~pulse_stage.core.errors.UpstreamError` with the reported status.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from pulse_stage.core.errors import UpstreamError
from pulse_stage.core.settings import settings

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400
HTTP_GATEWAY_TIMEOUT = 504


@dataclass(frozen=True)
class MetadataConfig:
    """Immutable configuration for metadata lookups."""

    base_url: str
    api_key: str | None
    timeout_seconds: float


def load_metadata_config() -> MetadataConfig:
    """Build configuration object from global settings."""

    return MetadataConfig(
        base_url=settings.metadata_api_url,
        api_key=settings.iframely_key,
        timeout_seconds=float(settings.metadata_http_timeout_seconds),
    )


def _coerce_status(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class MetadataClient:
    """HTTP client wrapper for metadata-extraction requests."""

    def __init__(
        self,
        config: MetadataConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_metadata_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                    follow_redirects=True,
                )
        return self._client

    def _build_params(self, url: str) -> dict[str, str]:
        params = {"iframe": "1", "omit_script": "1", "url": url}
        if self.config.api_key:
            params["key"] = self.config.api_key
        return params

    async def fetch(self, url: str) -> dict[str, Any]:
        """Fetch raw metadata for ``url``.

        Args:
            url: The URL to extract metadata for.

        Returns:
            The decoded JSON document returned by the service.

        Raises:
            UpstreamError: On timeout, transport failure, a non-JSON body, or
                when the service reports its own failure status.
        """
        client = await self._ensure_client()
        try:
            response = await client.get(self.config.base_url, params=self._build_params(url))
        except httpx.TimeoutException as exc:
            logger.warning("Metadata lookup for %s timed out", url)
            raise UpstreamError("Metadata service timed out", HTTP_GATEWAY_TIMEOUT) from exc
        except httpx.HTTPError as exc:
            logger.warning("Metadata lookup for %s failed: %s", url, exc)
            raise UpstreamError(f"Metadata request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Metadata service responded with {response.status_code}",
                response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamError("Unexpected metadata payload", response.status_code)

        # The service may answer 200 while reporting its own failure.
        if payload.get("status") or payload.get("error"):
            upstream_status = _coerce_status(payload.get("status")) or response.status_code
            message = str(payload.get("error") or "Failed to get preview")
            logger.warning("Metadata service rejected %s: %s (%s)", url, message, upstream_status)
            raise UpstreamError(message, upstream_status)

        if response.status_code >= HTTP_BAD_REQUEST:
            raise UpstreamError(
                f"Metadata service responded with {response.status_code}",
                response.status_code,
            )

        return payload

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_metadata_client: MetadataClient | None = None


def get_metadata_client() -> MetadataClient:
    """Return a process-wide metadata client instance."""

    global _metadata_client
    if _metadata_client is None:
        _metadata_client = MetadataClient()
    return _metadata_client
