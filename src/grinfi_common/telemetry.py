from __future__ import annotations

import datetime as _dt
import json
import logging
import threading
from typing import Any

from grinfi_config.settings import telemetry_dir, telemetry_enabled
from grinfi_common.context import get_request_id

logger = logging.getLogger(__name__)

TELEMETRY_FILE = "mcp-telemetry.jsonl"

REDACT_TOKEN = "***redacted***"

_SECRET_KEYS = {
    "authorization",
    "access_token",
    "token",
    "api_key",
    "apikey",
    "provider_api_token",
    "connection_settings",
}

# Contact details that flow through tool arguments.
_PII_KEYS = {
    "email",
    "personal_email",
    "work_email",
    "from_email",
    "to_email",
    "cc",
    "bcc",
    "linkedin",
    "linkedin_id",
    "phone",
}

_write_lock = threading.Lock()


def _redact_secrets(obj: Any) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in _SECRET_KEYS:
                if isinstance(v, str) and v.strip().lower().startswith("bearer "):
                    out[k] = "Bearer " + REDACT_TOKEN
                else:
                    out[k] = REDACT_TOKEN
            else:
                out[k] = _redact_secrets(v)
        return out
    if isinstance(obj, list):
        return [_redact_secrets(x) for x in obj]
    return obj


def _redact_pii(obj: Any) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in _PII_KEYS:
                out[k] = REDACT_TOKEN
            else:
                out[k] = _redact_pii(v)
        return out
    if isinstance(obj, list):
        return [_redact_pii(x) for x in obj]
    return obj


def redact(obj: Any) -> Any:
    return _redact_pii(_redact_secrets(obj))


def log_event(
    kind: str,
    name: str,
    args: dict | None = None,
    ok: bool = True,
    ms: int = 0,
    *,
    client_id: str | None = None,
    corr_id: str | None = None,
    telemetry_file: str = TELEMETRY_FILE,
) -> None:
    """
    Append one JSONL telemetry record for a tool call.

    Telemetry is best-effort: an unwritable directory is logged, never raised
    into the tool call.
    """
    if not telemetry_enabled():
        return

    rid = get_request_id()
    rec = {
        "ts": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "name": name,
        "client_id": client_id,
        "request_id": rid,
        "corr_id": corr_id or rid,
        "args": {} if args is None else dict(args),
        "ok": bool(ok),
        "ms": int(ms),
    }

    line = json.dumps(redact(rec), ensure_ascii=False, default=str)
    try:
        d = telemetry_dir()
        d.mkdir(parents=True, exist_ok=True)
        with _write_lock, (d / telemetry_file).open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError as e:
        logger.warning("telemetry write failed: %s", e)
