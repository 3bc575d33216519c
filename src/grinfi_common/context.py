from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Correlation id of the tool call currently executing. Sent upstream as
# X-Request-Id and written to telemetry.
_request_id_ctx: ContextVar[str | None] = ContextVar("grinfi_request_id", default=None)


def new_request_id() -> str:
    return uuid.uuid4().hex


def get_request_id() -> str:
    rid = _request_id_ctx.get()
    if not rid:
        rid = new_request_id()
        _request_id_ctx.set(rid)
    return rid


@contextmanager
def bind_request_id(rid: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of one tool call, then restore the previous one."""
    rid = rid or new_request_id()
    token = _request_id_ctx.set(rid)
    try:
        yield rid
    finally:
        _request_id_ctx.reset(token)
