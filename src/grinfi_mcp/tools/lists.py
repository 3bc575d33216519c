from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

LIST_PATH = "/leads/api/lists/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(mcp, "list_lists", "Get all contact lists. Supports pagination, sorting, and search.")
    async def list_lists(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/leads/api/lists", query=query))

    @grinfi_tool(mcp, "get_list", "Get a specific contact list by UUID.")
    async def get_list(uuid: Annotated[str, Field(description="UUID of the list")]) -> str:
        return json_result(await client.request_async("GET", api_path(LIST_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "create_list", "Create a new contact list.")
    async def create_list(name: Annotated[str, Field(description="Name of the new list")]) -> str:
        return json_result(await client.request_async("POST", "/leads/api/lists", {"name": name}))

    @grinfi_tool(mcp, "update_list", "Update (rename) a contact list.")
    async def update_list(
        uuid: Annotated[str, Field(description="UUID of the list")],
        name: Annotated[str, Field(description="New list name")],
    ) -> str:
        return json_result(await client.request_async("PUT", api_path(LIST_PATH, uuid=uuid), {"name": name}))

    @grinfi_tool(mcp, "delete_list", "Delete a contact list by UUID. This action is irreversible.")
    async def delete_list(uuid: Annotated[str, Field(description="UUID of the list")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(LIST_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "get_list_metrics", "Get metrics (lead counts) for specified lists.")
    async def get_list_metrics(uuids: Annotated[list[str], Field(description="Array of list UUIDs")]) -> str:
        return json_result(await client.request_async("POST", "/leads/api/lists/metrics", {"uuids": uuids}))
