from __future__ import annotations

import inspect

import pytest

from grinfi_common import tooling
from grinfi_common.context import get_request_id
from grinfi_common.errors import GrinfiAPIError
from grinfi_common.telemetry import REDACT_TOKEN
from grinfi_common.tooling import InstrumentConfig, error_summary, instrument_async_tool, sanitize_args_for_log


@pytest.fixture()
def events(monkeypatch):
    seen = []

    def _capture(kind, name, args=None, ok=True, ms=0, **kw):
        seen.append({"kind": kind, "name": name, "args": args, "ok": ok, "ms": ms, **kw})

    monkeypatch.setattr(tooling, "log_event", _capture)
    return seen


def test_sanitize_args_for_log():
    out = sanitize_args_for_log({"api_key": "x", "Authorization": "Bearer y", "uuid": "u1"})
    assert out == {"api_key": REDACT_TOKEN, "Authorization": REDACT_TOKEN, "uuid": "u1"}
    assert sanitize_args_for_log(None) == {}


def test_error_summary_for_upstream_errors():
    s = error_summary(GrinfiAPIError(429, "slow down"))
    assert s["code"] == "upstream_error"
    assert s["status"] == 429
    assert error_summary(ValueError("bad"))["code"] == "ValueError"


@pytest.mark.asyncio
async def test_success_is_recorded_with_a_correlation_id(events):
    seen_rid = {}

    @instrument_async_tool(InstrumentConfig(kind="tool", name="get_tag", client_id="c1"))
    async def get_tag(uuid: str, token: str | None = None) -> str:
        seen_rid["rid"] = get_request_id()
        return uuid

    assert await get_tag("t1", token="secret") == "t1"

    (ev,) = events
    assert ev["kind"] == "tool"
    assert ev["name"] == "get_tag"
    assert ev["ok"] is True
    assert ev["client_id"] == "c1"
    assert ev["corr_id"] == seen_rid["rid"]
    assert ev["args"] == {"args": {"uuid": "t1", "token": REDACT_TOKEN}}


@pytest.mark.asyncio
async def test_failure_is_recorded_and_reraised(events):
    @instrument_async_tool(InstrumentConfig(kind="tool", name="get_list", client_id="c1"))
    async def get_list(uuid: str) -> str:
        raise GrinfiAPIError(404, "missing")

    with pytest.raises(GrinfiAPIError):
        await get_list("l1")

    (ev,) = events
    assert ev["ok"] is False
    assert ev["args"]["error"]["status"] == 404


def test_signature_is_preserved():
    async def list_tags(limit: int | None = None, offset: int | None = None) -> str:
        return ""

    wrapped = instrument_async_tool(InstrumentConfig(kind="tool", name="list_tags", client_id="c"))(list_tags)
    assert inspect.signature(wrapped) == inspect.signature(list_tags)
    assert wrapped.__name__ == "list_tags"
