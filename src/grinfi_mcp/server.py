from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from grinfi_common.errors import GrinfiError
from grinfi_config.settings import grinfi_api_key, init_runtime
from grinfi_mcp import __version__
from grinfi_mcp.client import GrinfiClient
from grinfi_mcp.tools import (
    ai,
    attachments,
    automations,
    blacklists,
    companies,
    contacts,
    emails,
    linkedin,
    lists,
    mailboxes,
    notes,
    pipeline,
    sender_profiles,
    tags,
    tasks,
    webhooks,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "grinfi"

TOOL_GROUPS = (
    contacts,
    lists,
    companies,
    tags,
    pipeline,
    notes,
    blacklists,
    webhooks,
    attachments,
    automations,
    tasks,
    linkedin,
    emails,
    mailboxes,
    sender_profiles,
    ai,
)


def build_server(client: GrinfiClient | None = None) -> FastMCP:
    """
    Fresh FastMCP registry with every Grinfi tool registered.

    Called once by the stdio entry point and once per session by the HTTP
    binding, so no state is shared between sessions except `client`.
    """
    client = client or GrinfiClient()
    mcp = FastMCP(name=SERVER_NAME)
    # FastMCP has no version kwarg; the low-level server reports this one.
    lowlevel_server(mcp).version = __version__
    for group in TOOL_GROUPS:
        group.register(mcp, client)
    return mcp


def lowlevel_server(mcp: FastMCP):
    """The low-level MCP server behind a FastMCP registry."""
    return mcp._mcp_server


def main() -> None:
    # Entry points (console_scripts) call main() directly, so we must perform
    # runtime initialization here (dotenv + logging).
    init_runtime()
    try:
        grinfi_api_key()
        mcp = build_server()
    except GrinfiError as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)

    logger.info("Grinfi MCP server running on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
