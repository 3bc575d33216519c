"""
Request forwarder for the Grinfi REST API.

Goals:
- One place that knows the base origin, auth header and response conventions.
- Keep dependencies limited to `requests` (and its bundled urllib3).
- Provide a small, testable surface area for all tool handlers.

This module intentionally avoids any MCP coupling.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from grinfi_common.context import get_request_id
from grinfi_common.errors import GrinfiAPIError
from grinfi_config.settings import grinfi_api_key


logger = logging.getLogger(__name__)

BASE_URL = "https://leadgen.grinfi.io"

BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

NO_CONTENT_ACK = {"success": True, "message": "Operation completed successfully (204 No Content)"}


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


DEFAULT_CONNECT_TIMEOUT_S = _env_float("GRINFI_HTTP_CONNECT_TIMEOUT", 3.05)
DEFAULT_READ_TIMEOUT_S = _env_float("GRINFI_HTTP_READ_TIMEOUT", 60.0)
DEFAULT_TIMEOUT = (DEFAULT_CONNECT_TIMEOUT_S, DEFAULT_READ_TIMEOUT_S)

# Upstream errors surface to the caller as-is; retries are opt-in.
DEFAULT_RETRIES = _env_int("GRINFI_HTTP_RETRIES", 0)
DEFAULT_BACKOFF = _env_float("GRINFI_HTTP_BACKOFF", 0.4)
DEFAULT_RETRY_STATUS = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = BASE_URL
    timeout: tuple[float, float] = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    backoff: float = DEFAULT_BACKOFF
    retry_statuses: tuple[int, ...] = DEFAULT_RETRY_STATUS
    user_agent: str = os.getenv("GRINFI_HTTP_USER_AGENT", "grinfi-mcp/1.0")


def api_path(template: str, **segments: Any) -> str:
    """Fill `{name}` placeholders in an API path with URL-escaped values."""
    return template.format(**{k: quote(str(v), safe="") for k, v in segments.items()})


def _clean_query(query: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop unset and empty query values; they are never sent as empty parameters."""
    out: dict[str, str] = {}
    for k, v in (query or {}).items():
        if v is None or v == "":
            continue
        out[k] = str(v)
    return out


def decode_response(resp: requests.Response) -> Any:
    """
    Map an upstream response to a JSON value.

    204 becomes a synthetic acknowledgement, non-2xx raises GrinfiAPIError,
    and a 2xx body that is not JSON is wrapped as {"rawResponse": text}.
    """
    if resp.status_code == 204:
        return dict(NO_CONTENT_ACK)

    text = resp.text
    if not 200 <= resp.status_code < 300:
        raise GrinfiAPIError(resp.status_code, text)

    try:
        return json.loads(text)
    except ValueError:
        return {"rawResponse": text}


class GrinfiClient:
    """A small wrapper around `requests.Session` bound to the Grinfi API."""

    def __init__(self, *, config: ClientConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or ClientConfig()
        self.session = session or requests.Session()
        self._configure_session(self.session, self.config)

    @staticmethod
    def _configure_session(session: requests.Session, config: ClientConfig) -> None:
        session.headers.setdefault("User-Agent", config.user_agent)

        if config.retries <= 0 or not hasattr(session, "mount"):
            return

        retry = Retry(
            total=config.retries,
            connect=config.retries,
            read=config.retries,
            status=config.retries,
            backoff_factor=config.backoff,
            status_forcelist=config.retry_statuses,
            allowed_methods=frozenset(["HEAD", "GET", "OPTIONS"]),
            respect_retry_after_header=True,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

    def _headers(self) -> dict[str, str]:
        # Resolving the key first means a missing key fails before any network I/O.
        return {
            "Authorization": f"Bearer {grinfi_api_key()}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Request-Id": get_request_id(),
        }

    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform one API call and return the decoded JSON value."""
        method = method.upper()
        headers = self._headers()
        url = f"{self.config.base_url.rstrip('/')}{path}"

        t0 = time.perf_counter()
        try:
            resp = self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=_clean_query(query) or None,
                json=body if body is not None and method in BODY_METHODS else None,
                timeout=self.config.timeout,
            )
            result = decode_response(resp)
        except (requests.RequestException, GrinfiAPIError) as e:
            ms = int((time.perf_counter() - t0) * 1000)
            logger.warning(
                "HTTP %s %s failed (status=%s, ms=%s): %s",
                method,
                path,
                getattr(e, "status", None),
                ms,
                str(e)[:300],
            )
            raise

        logger.debug("HTTP %s %s -> %s (%sms)", method, path, resp.status_code, int((time.perf_counter() - t0) * 1000))
        return result

    async def request_async(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        """Same as request(), run in a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.request, method, path, body, query)
