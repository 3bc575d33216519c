from __future__ import annotations

import pytest

from grinfi_mcp import server


def test_main_exits_when_grinfi_api_key_missing(monkeypatch):
    monkeypatch.delenv("GRINFI_API_KEY", raising=False)
    monkeypatch.setattr(server, "init_runtime", lambda: None)

    with pytest.raises(SystemExit) as ei:
        server.main()
    assert ei.value.code == 1


def test_main_runs_stdio_transport(monkeypatch):
    monkeypatch.setattr(server, "init_runtime", lambda: None)
    seen = {}
    monkeypatch.setattr(server.FastMCP, "run", lambda self, transport="stdio": seen.update(transport=transport))

    server.main()

    assert seen == {"transport": "stdio"}
