from __future__ import annotations

import functools
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from grinfi_common.context import bind_request_id
from grinfi_common.errors import GrinfiAPIError
from grinfi_common.telemetry import REDACT_TOKEN, TELEMETRY_FILE, log_event

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared helpers for MCP tool handlers
# ---------------------------------------------------------------------------


_REDACTION_KEYS = {"authorization", "token", "access_token", "api_key", "apikey", "provider_api_token"}


def sanitize_args_for_log(args: dict | None) -> dict:
    """Remove obvious secrets from args (telemetry layer also redacts)."""
    out: dict[str, Any] = {}
    for k, v in (args or {}).items():
        out[str(k)] = REDACT_TOKEN if str(k).lower() in _REDACTION_KEYS else v
    return out


def error_summary(exc: BaseException) -> dict:
    """Compact error description for telemetry records."""
    if isinstance(exc, GrinfiAPIError):
        return {"code": "upstream_error", "status": exc.status, "message": str(exc)[:500]}
    return {"code": type(exc).__name__, "message": str(exc)[:500]}


@dataclass(frozen=True)
class InstrumentConfig:
    kind: str
    name: str
    client_id: str
    telemetry_file: str = TELEMETRY_FILE


def instrument_async_tool(cfg: InstrumentConfig):
    """
    Decorator for async MCP tool handlers.

    Binds a fresh correlation id per call, records one telemetry event
    (sanitized args, ok flag, elapsed ms, error) and re-raises failures so the
    MCP layer reports them as tool errors.
    """

    def decorator(fn: Callable[..., Awaitable[Any]]):
        fn_sig = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any):
            with bind_request_id() as corr_id:
                t0 = time.perf_counter()
                bound = fn_sig.bind_partial(*args, **kwargs)
                args_for_log: dict[str, Any] = {"args": sanitize_args_for_log(dict(bound.arguments))}

                ok = True
                try:
                    return await fn(*args, **kwargs)
                except Exception as e:
                    ok = False
                    args_for_log["error"] = error_summary(e)
                    logger.warning("tool %s failed: %s", cfg.name, e)
                    raise
                finally:
                    ms = int((time.perf_counter() - t0) * 1000)
                    log_event(
                        cfg.kind,
                        cfg.name,
                        args_for_log,
                        ok=ok,
                        ms=ms,
                        client_id=cfg.client_id,
                        corr_id=corr_id,
                        telemetry_file=cfg.telemetry_file,
                    )

        # Preserve signature for schema generation
        wrapper.__signature__ = fn_sig  # type: ignore[attr-defined]
        return wrapper

    return decorator
