"""Tests for the metadata-extraction HTTP client."""

import httpx
import pytest

from pulse_stage.core.errors import UpstreamError
from pulse_stage.services.metadata import MetadataClient, MetadataConfig

CONFIG = MetadataConfig(
    base_url="https://metadata.test/api/iframely",
    api_key="secret",
    timeout_seconds=1.0,
)


def _client(handler) -> MetadataClient:
    return MetadataClient(config=CONFIG, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_returns_payload_and_sends_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"meta": {"title": "Example"}, "links": {}})

    client = _client(handler)
    try:
        payload = await client.fetch("https://example.com/a")
    finally:
        await client.close()

    assert payload["meta"]["title"] == "Example"
    params = seen[0].url.params
    assert params["url"] == "https://example.com/a"
    assert params["key"] == "secret"
    assert params["iframe"] == "1"
    assert params["omit_script"] == "1"


@pytest.mark.asyncio
async def test_fetch_surfaces_service_reported_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status": 404, "error": "Page not found"})

    client = _client(handler)
    with pytest.raises(UpstreamError) as excinfo:
        await client.fetch("https://example.com/missing")
    await client.close()

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Page not found"


@pytest.mark.asyncio
async def test_fetch_error_field_on_success_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "Failed to get preview"})

    client = _client(handler)
    with pytest.raises(UpstreamError) as excinfo:
        await client.fetch("https://example.com/x")
    await client.close()

    assert excinfo.value.status_code == 502
    assert excinfo.value.upstream_status == 200


@pytest.mark.asyncio
async def test_fetch_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    client = _client(handler)
    with pytest.raises(UpstreamError) as excinfo:
        await client.fetch("https://example.com/x")
    await client.close()

    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_fetch_timeout_maps_to_gateway_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler)
    with pytest.raises(UpstreamError) as excinfo:
        await client.fetch("https://example.com/slow")
    await client.close()

    assert excinfo.value.status_code == 504


@pytest.mark.asyncio
async def test_fetch_transport_error_maps_to_bad_gateway():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(UpstreamError) as excinfo:
        await client.fetch("https://example.com/down")
    await client.close()

    assert excinfo.value.status_code == 502
