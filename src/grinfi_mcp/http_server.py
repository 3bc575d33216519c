"""
Streamable HTTP binding for the Grinfi MCP server.

Every MCP session gets its own tool registry and transport. Only an
`initialize` POST without a session id opens one. Sessions are kept in a
table owned by the application and removed when their server task ends.

Endpoints:
- GET  /health        liveness check, no auth
- *    /mcp/{key}     key in the path
- *    /mcp           key as `Authorization: Bearer <key>`
"""

from __future__ import annotations

import json
import logging
import secrets
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable
from uuid import uuid4

import anyio
from anyio.abc import TaskGroup, TaskStatus
import uvicorn
from mcp.server.fastmcp import FastMCP
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER, StreamableHTTPServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route
from starlette.types import Message, Receive, Scope, Send

from grinfi_common.errors import GrinfiError
from grinfi_config.settings import http_host, http_port, init_runtime, mcp_api_key
from grinfi_mcp.client import GrinfiClient
from grinfi_mcp.server import build_server, lowlevel_server

logger = logging.getLogger(__name__)

SERVER_LABEL = "grinfi-mcp"


@dataclass
class Session:
    session_id: str
    transport: Any
    server: FastMCP | None = None


class SessionTable:
    """
    Live MCP sessions keyed by session id.

    Session server tasks run in a task group entered by `run()` (the app
    lifespan). Each task removes its own entry when it ends, whatever the
    reason.
    """

    def __init__(self, server_factory: Callable[[], FastMCP]) -> None:
        self._server_factory = server_factory
        self._sessions: dict[str, Session] = {}
        self._task_group: TaskGroup | None = None

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> Session | None:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def register(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    def discard(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("session %s closed (%d open)", session_id, len(self._sessions))

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        async with anyio.create_task_group() as tg:
            self._task_group = tg
            try:
                yield
            finally:
                tg.cancel_scope.cancel()
                self._task_group = None

    async def open(self) -> Session:
        """Create a registry + transport pair, start its server task and register it."""
        if self._task_group is None:
            raise RuntimeError("session table is not running")

        server = self._server_factory()
        session_id = uuid4().hex
        transport = StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=False,
            event_store=None,
        )
        session = Session(session_id=session_id, transport=transport, server=server)
        self.register(session)
        try:
            await self._task_group.start(self._serve, session)
        except BaseException:
            self.discard(session_id)
            raise
        logger.info("session %s opened (%d open)", session_id, len(self._sessions))
        return session

    async def _serve(self, session: Session, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        lowlevel = lowlevel_server(session.server)
        try:
            async with session.transport.connect() as (read_stream, write_stream):
                task_status.started()
                await lowlevel.run(
                    read_stream,
                    write_stream,
                    lowlevel.create_initialization_options(),
                    stateless=False,
                )
        except Exception:
            logger.exception("session %s crashed", session.session_id)
        finally:
            self.discard(session.session_id)


def _same_secret(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class McpEndpoint:
    """ASGI endpoint serving both /mcp and /mcp/{key}."""

    def __init__(self, api_key: str, sessions: SessionTable) -> None:
        self.api_key = api_key
        self.sessions = sessions

    def is_authorized(self, request: Request) -> bool:
        key = request.path_params.get("key")
        if key is not None:
            return _same_secret(key, self.api_key)
        header = request.headers.get("authorization")
        return header is not None and _same_secret(header, f"Bearer {self.api_key}")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        if not self.is_authorized(request):
            await JSONResponse({"error": "Unauthorized"}, status_code=401)(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self._dispatch(request, scope, receive, tracking_send)
        except Exception:
            logger.exception("MCP request error")
            if not response_started:
                response = JSONResponse({"error": "Internal server error"}, status_code=500)
                await response(scope, receive, send)

    async def _dispatch(self, request: Request, scope: Scope, receive: Receive, send: Send) -> None:
        session_id = request.headers.get(MCP_SESSION_ID_HEADER)

        session = self.sessions.get(session_id)
        if session is not None:
            await session.transport.handle_request(scope, receive, send)
            if session.transport.is_terminated:
                self.sessions.discard(session.session_id)
            return

        if request.method == "DELETE":
            await JSONResponse({"error": "Session not found"}, status_code=404)(scope, receive, send)
            return

        if session_id:
            # Expired or foreign id: the client must re-initialize.
            await _rpc_error(404, "Session not found")(scope, receive, send)
            return

        if request.method != "POST":
            await _rpc_error(400, "Bad Request: No valid session ID provided")(scope, receive, send)
            return

        body = await request.body()
        if not _is_initialize(body):
            await _rpc_error(400, "Bad Request: No valid session ID provided")(scope, receive, send)
            return

        status = 0

        async def status_send(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        session = await self.sessions.open()
        try:
            await session.transport.handle_request(scope, _replay_body(body, receive), status_send)
        finally:
            if not 200 <= status < 300:
                # Rejected handshake (bad Accept header, malformed params...).
                await session.transport.terminate()
                self.sessions.discard(session.session_id)


def _rpc_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "id": None, "error": {"code": -32000, "message": message}},
        status_code=status_code,
    )


def _is_initialize(body: bytes) -> bool:
    try:
        payload = json.loads(body)
    except ValueError:
        return False
    return isinstance(payload, dict) and payload.get("method") == "initialize"


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Receive callable that yields an already-read body once, then defers to `receive`."""
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


async def health(request: Request) -> Response:
    return JSONResponse({"status": "ok", "server": SERVER_LABEL})


async def not_found(request: Request, exc: Exception) -> Response:
    return PlainTextResponse("Not found", status_code=404)


def create_app(
    api_key: str | None = None,
    server_factory: Callable[[], FastMCP] | None = None,
) -> Starlette:
    """
    Build the ASGI app. `MCP_API_KEY` is resolved here so a missing key fails
    at startup rather than on the first request.
    """
    api_key = api_key or mcp_api_key()
    if server_factory is None:
        # One upstream client (and connection pool) shared by all sessions.
        client = GrinfiClient()
        server_factory = lambda: build_server(client)  # noqa: E731

    sessions = SessionTable(server_factory)
    endpoint = McpEndpoint(api_key, sessions)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with sessions.run():
            yield

    app = Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/mcp", endpoint),
            Route("/mcp/{key}", endpoint),
        ],
        exception_handlers={404: not_found, 405: not_found},
        lifespan=lifespan,
    )
    app.state.sessions = sessions
    return app


def main() -> None:
    init_runtime()
    try:
        app = create_app()
        host, port = http_host(), http_port()
    except GrinfiError as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)

    logger.info("Grinfi MCP HTTP server running on http://%s:%s/mcp", host, port)
    logger.info("Health check: http://%s:%s/health", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
