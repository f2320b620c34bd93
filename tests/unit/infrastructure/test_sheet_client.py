import httpx
import pytest

from engagement_dashboard.domain.errors import EmptyOrInvalidPayload, TransportError
from engagement_dashboard.infrastructure.http.sheet_client import (
    SheetClient,
    looks_like_html,
)

URL = "https://sheets.test/v1.csv"


@pytest.mark.asyncio
async def test_fetch_csv_returns_body(sheet_client_for):
    client = sheet_client_for(lambda request: httpx.Response(200, text="a,b\n1,2\n"))
    assert await client.fetch_csv(URL) == "a,b\n1,2\n"


@pytest.mark.asyncio
async def test_html_body_is_invalid_payload_not_transport_error(sheet_client_for):
    html = "<!DOCTYPE html><HTML><body>Sign in</body></HTML>"
    client = sheet_client_for(lambda request: httpx.Response(200, text=html))
    with pytest.raises(EmptyOrInvalidPayload):
        await client.fetch_csv(URL)


@pytest.mark.asyncio
async def test_empty_body_is_invalid_payload(sheet_client_for):
    client = sheet_client_for(lambda request: httpx.Response(200, text="  \n"))
    with pytest.raises(EmptyOrInvalidPayload):
        await client.fetch_csv(URL)


@pytest.mark.asyncio
async def test_non_success_status_is_transport_error(sheet_client_for):
    client = sheet_client_for(lambda request: httpx.Response(404, text="nope"))
    with pytest.raises(TransportError) as exc:
        await client.fetch_csv(URL)
    assert exc.value.status_code == 404
    assert "HTTP 404" in str(exc.value)


@pytest.mark.asyncio
async def test_network_failure_is_transport_error(sheet_client_for):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = sheet_client_for(handler)
    with pytest.raises(TransportError) as exc:
        await client.fetch_csv(URL)
    assert "connection refused" in str(exc.value)
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_connection_errors_are_retried_within_a_fetch(caplog):
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ConnectError("flaky", request=request)
        return httpx.Response(200, text="a\n1\n")

    caplog.set_level("WARNING")
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = SheetClient(http, retries=2, base_delay=0)
    assert await client.fetch_csv(URL) == "a\n1\n"
    assert calls["n"] == 2
    assert any("sheet_fetch_retry" in r.message for r in caplog.records)


def test_looks_like_html_is_case_insensitive():
    assert looks_like_html("<HTML>")
    assert not looks_like_html("成员,视频ID\nA,v\n")


@pytest.mark.asyncio
async def test_malformed_url_is_transport_error(sheet_client_for):
    client = sheet_client_for(lambda request: httpx.Response(200, text="a\n1\n"))
    with pytest.raises(TransportError):
        await client.fetch_csv("https://sheets .test/\x00v1.csv")
