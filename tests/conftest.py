from __future__ import annotations

import pytest

from grinfi_mcp.server import build_server
from tests.helpers.fakes import FakeClient
from tests.helpers.mcp_runtime import build_test_env, mcp_stdio_session


@pytest.fixture(autouse=True)
def _grinfi_env(monkeypatch, tmp_path):
    """Hermetic defaults: a dummy upstream key and telemetry kept out of the repo."""
    monkeypatch.setenv("GRINFI_API_KEY", "test-grinfi-key")
    monkeypatch.setenv("GRINFI_DISABLE_TELEMETRY", "1")
    monkeypatch.setenv("GRINFI_TELEMETRY_DIR", str(tmp_path / "telemetry"))
    monkeypatch.delenv("GRINFI_UNREAD_CONCURRENCY", raising=False)
    monkeypatch.delenv("MCP_CLIENT_ID", raising=False)


@pytest.fixture()
def fake_client():
    return FakeClient()


@pytest.fixture()
def server(fake_client):
    """In-process FastMCP registry wired to the fake client."""
    return build_server(fake_client)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def grinfi_session(tmp_path):
    """Initialized session for the Grinfi MCP server (stdio transport)."""
    env = build_test_env(tmp_path)
    async with mcp_stdio_session("grinfi_mcp.server", env=env) as session:
        yield session
