from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

PROFILE_PATH = "/flows/api/sender-profiles/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(
        mcp,
        "list_sender_profiles",
        "Get all sender profiles. These represent the LinkedIn/email accounts you send from.",
    )
    async def list_sender_profiles(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/flows/api/sender-profiles", query=query))

    @grinfi_tool(mcp, "get_sender_profile", "Get a sender profile by UUID.")
    async def get_sender_profile(uuid: Annotated[str, Field(description="UUID of the sender profile")]) -> str:
        return json_result(await client.request_async("GET", api_path(PROFILE_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "create_sender_profile", "Create a new sender profile.")
    async def create_sender_profile(
        first_name: str,
        last_name: str,
        label: str | None = None,
        assignee_user_id: int | None = None,
    ) -> str:
        body = {
            "first_name": first_name,
            "last_name": last_name,
            **compact(label=label or None, assignee_user_id=assignee_user_id),
        }
        return json_result(await client.request_async("POST", "/flows/api/sender-profiles", body))

    @grinfi_tool(mcp, "update_sender_profile", "Update a sender profile by UUID.")
    async def update_sender_profile(
        uuid: Annotated[str, Field(description="UUID of the sender profile to update")],
        first_name: str | None = None,
        last_name: str | None = None,
        label: str | None = None,
        schedule: dict[str, Any] | None = None,
    ) -> str:
        body = compact(first_name=first_name, last_name=last_name, label=label, schedule=schedule)
        return json_result(await client.request_async("PUT", api_path(PROFILE_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "delete_sender_profile", "Delete a sender profile by UUID.")
    async def delete_sender_profile(
        uuid: Annotated[str, Field(description="UUID of the sender profile to delete")],
    ) -> str:
        return json_result(await client.request_async("DELETE", api_path(PROFILE_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "enable_sender_profile", "Enable a sender profile.")
    async def enable_sender_profile(
        uuid: Annotated[str, Field(description="UUID of the sender profile to enable")],
    ) -> str:
        return json_result(await client.request_async("PUT", api_path(PROFILE_PATH + "/enable", uuid=uuid)))

    @grinfi_tool(mcp, "disable_sender_profile", "Disable a sender profile.")
    async def disable_sender_profile(
        uuid: Annotated[str, Field(description="UUID of the sender profile to disable")],
    ) -> str:
        return json_result(await client.request_async("PUT", api_path(PROFILE_PATH + "/disable", uuid=uuid)))
