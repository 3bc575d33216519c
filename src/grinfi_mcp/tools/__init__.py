"""
Tool groups of the Grinfi MCP server.

Each module exposes `register(mcp, client)` which adds its tools to a FastMCP
instance. Handlers are async, return one JSON text payload and raise on
upstream errors; FastMCP turns the exception into an error result.

Tool modules must not use `from __future__ import annotations`: the pydantic
schema is built from the evaluated parameter annotations.
"""

from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_common.tooling import InstrumentConfig, instrument_async_tool
from grinfi_config.settings import mcp_client_id


def _cfg(name: str) -> InstrumentConfig:
    return InstrumentConfig(kind="tool", name=name, client_id=mcp_client_id())


def grinfi_tool(mcp: FastMCP, name: str, description: str):
    """Instrument an async handler and register it on `mcp` under `name`."""

    def decorator(fn):
        mcp.tool(name=name, description=description)(instrument_async_tool(_cfg(name))(fn))
        return fn

    return decorator


# Parameters shared by the paginated list endpoints.
Limit = Annotated[int | None, Field(description="Number of results to return")]
Offset = Annotated[int | None, Field(description="Number of results to skip")]
OrderField = Annotated[str | None, Field(description="Field to sort by")]
OrderType = Annotated[Literal["asc", "desc"] | None, Field(description="Sort direction")]
Search = Annotated[str | None, Field(description="Free-text search")]

ObjectType = Literal["lead", "company"]
