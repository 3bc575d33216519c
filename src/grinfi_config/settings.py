from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from grinfi_common.errors import ConfigurationError


DEFAULT_HTTP_PORT = 3000
DEFAULT_HTTP_HOST = "0.0.0.0"


def _find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward until we find pyproject.toml or .git.
    """
    start = start.resolve()
    for p in (start, *start.parents):
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return None


@lru_cache(maxsize=1)
def repo_root() -> Path:
    """Best-effort repository root discovery.

    Order of precedence:
      1) GRINFI_REPO_ROOT (explicit override)
      2) walk upward from current working directory
      3) walk upward from this module file's directory
    """
    explicit = os.getenv("GRINFI_REPO_ROOT")
    if explicit:
        p = Path(explicit).expanduser().resolve()
        if not p.is_dir():
            raise ConfigurationError(f"GRINFI_REPO_ROOT does not exist or is not a directory: {p}")
        return p

    cwd = Path.cwd().resolve()
    root = _find_repo_root(cwd)
    if root:
        return root

    here_dir = Path(__file__).resolve().parent
    root = _find_repo_root(here_dir)
    if root:
        return root

    return cwd


@lru_cache(maxsize=1)
def load_env_once() -> Optional[Path]:
    """
    Load dotenv exactly once. Precedence:
      1) GRINFI_ENV_FILE (explicit path)
      2) repo-root/.env
    """
    explicit = os.getenv("GRINFI_ENV_FILE")
    candidates = []

    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(repo_root() / ".env")

    for p in candidates:
        p = p.resolve()
        if p.is_file():
            # Do NOT override already-set environment variables
            load_dotenv(dotenv_path=str(p), override=False)
            return p

    return None


def grinfi_api_key() -> str:
    """
    Upstream credential, read at call time so a rotated key is picked up
    without restarting the server.
    """
    key = os.getenv("GRINFI_API_KEY")
    if not key:
        raise ConfigurationError(
            "GRINFI_API_KEY environment variable is not set. "
            "Get your API key from Grinfi.io → Settings → API Keys."
        )
    return key


def mcp_api_key() -> str:
    """Shared secret protecting the HTTP endpoint."""
    key = os.getenv("MCP_API_KEY")
    if not key:
        raise ConfigurationError(
            "MCP_API_KEY environment variable is not set. Set a secret key to protect this endpoint."
        )
    return key


def http_port() -> int:
    raw = os.getenv("PORT", str(DEFAULT_HTTP_PORT))
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {raw!r}") from None


def http_host() -> str:
    return os.getenv("HOST", DEFAULT_HTTP_HOST)


def mcp_client_id() -> str:
    return os.getenv("MCP_CLIENT_ID", "grinfi-mcp")


def unread_concurrency() -> int:
    """Max in-flight contact lookups for get_unread_conversations (1 = sequential)."""
    try:
        return max(1, int(os.getenv("GRINFI_UNREAD_CONCURRENCY", "1")))
    except ValueError:
        return 1


def telemetry_dir() -> Path:
    """
    Default telemetry dir. Override with GRINFI_TELEMETRY_DIR.
    """
    p = os.getenv("GRINFI_TELEMETRY_DIR")
    if p:
        return Path(p).expanduser().resolve()
    return (repo_root() / "artifacts" / "telemetry").resolve()


def telemetry_enabled() -> bool:
    return os.getenv("GRINFI_DISABLE_TELEMETRY", "0").strip().lower() not in {"1", "true", "yes"}


def configure_logging() -> None:
    """
    Configure logging explicitly. No import-time side effects.
    Idempotent: if logging is already configured, do nothing.

    basicConfig writes to stderr, which keeps stdout free for the stdio transport.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.getenv("GRINFI_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = os.getenv(
        "GRINFI_LOG_FORMAT",
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.basicConfig(level=level, format=fmt)


def init_runtime(*, configure_logs: bool = True, load_env: bool = True) -> None:
    """
    Call this from entrypoints only (servers, scripts).
    """
    if load_env:
        load_env_once()
    if configure_logs:
        configure_logging()
