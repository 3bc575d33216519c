from __future__ import annotations

import pytest
import requests

from grinfi_common.context import bind_request_id
from grinfi_common.errors import ConfigurationError, GrinfiAPIError
from grinfi_mcp.client import BASE_URL, GrinfiClient, api_path


class _FakeResp:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class _FakeSession:
    def __init__(self, resp=None, exc: Exception | None = None):
        self.headers: dict[str, str] = {}
        self.resp = resp or _FakeResp(200, "{}")
        self.exc = exc
        self.calls: list[dict] = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.resp


def _client(resp=None, exc=None) -> tuple[GrinfiClient, _FakeSession]:
    session = _FakeSession(resp, exc)
    return GrinfiClient(session=session), session


def test_json_body_is_decoded_and_headers_are_set():
    client, session = _client(_FakeResp(200, '{"uuid": "c1", "name": "Ann"}'))

    out = client.request("GET", "/leads/api/leads/c1")

    assert out == {"uuid": "c1", "name": "Ann"}
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE_URL}/leads/api/leads/c1"
    assert call["headers"]["Authorization"] == "Bearer test-grinfi-key"
    assert call["headers"]["Accept"] == "application/json"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["params"] is None
    assert call["json"] is None
    assert session.headers["User-Agent"].startswith("grinfi-mcp")


def test_204_becomes_success_acknowledgement():
    client, _ = _client(_FakeResp(204, ""))

    out = client.request("DELETE", "/leads/api/tags/t1")

    assert out == {"success": True, "message": "Operation completed successfully (204 No Content)"}


def test_non_2xx_raises_with_status_and_raw_body():
    client, _ = _client(_FakeResp(404, '{"message":"Lead not found"}'))

    with pytest.raises(GrinfiAPIError) as ei:
        client.request("GET", "/leads/api/leads/missing")

    assert ei.value.status == 404
    assert ei.value.body == '{"message":"Lead not found"}'
    assert str(ei.value) == 'Grinfi API error 404: {"message":"Lead not found"}'


def test_non_json_success_body_is_wrapped():
    client, _ = _client(_FakeResp(200, "OK"))
    assert client.request("PUT", "/flows/api/flows/f1/start") == {"rawResponse": "OK"}


def test_unset_and_empty_query_values_are_omitted():
    client, session = _client()

    client.request("GET", "/leads/api/lists", query={"limit": "10", "offset": None, "filter[q]": ""})

    assert session.calls[0]["params"] == {"limit": "10"}


def test_body_sent_for_writes_and_delete_but_never_for_get():
    client, session = _client()

    client.request("POST", "/leads/api/lists", {"name": "Prospects"})
    client.request("DELETE", "/emails/api/mailboxes/m1", {"automation_reassign_mailboxes": False})
    client.request("GET", "/leads/api/lists", {"ignored": True})

    assert session.calls[0]["json"] == {"name": "Prospects"}
    assert session.calls[1]["json"] == {"automation_reassign_mailboxes": False}
    assert session.calls[2]["json"] is None


def test_missing_api_key_fails_before_any_network_io(monkeypatch):
    monkeypatch.delenv("GRINFI_API_KEY", raising=False)
    client, session = _client()

    with pytest.raises(ConfigurationError, match="GRINFI_API_KEY"):
        client.request("GET", "/leads/api/tags")

    assert session.calls == []


def test_request_id_is_propagated():
    client, session = _client()

    with bind_request_id("corr-123"):
        client.request("GET", "/leads/api/tags")

    assert session.calls[0]["headers"]["X-Request-Id"] == "corr-123"


def test_network_errors_propagate():
    client, _ = _client(exc=requests.ConnectionError("boom"))

    with pytest.raises(requests.ConnectionError):
        client.request("GET", "/leads/api/tags")


@pytest.mark.asyncio
async def test_request_async_matches_request():
    client, session = _client(_FakeResp(200, '{"data": [], "total": 0}'))

    out = await client.request_async("GET", "/leads/api/tags")

    assert out == {"data": [], "total": 0}
    assert len(session.calls) == 1


def test_api_path_escapes_segments():
    assert api_path("/leads/api/leads/{uuid}", uuid="a/b c") == "/leads/api/leads/a%2Fb%20c"
    assert api_path("/flows/api/flows/{f}/leads/{l}", f="f1", l="l1") == "/flows/api/flows/f1/leads/l1"
