from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import compact, json_result
from grinfi_mcp.tools import grinfi_tool

TAG_PATH = "/leads/api/tags/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(mcp, "list_tags", "List all tags in your account.")
    async def list_tags() -> str:
        return json_result(await client.request_async("GET", "/leads/api/tags"))

    @grinfi_tool(mcp, "create_tag", "Create a new tag.")
    async def create_tag(
        name: Annotated[str, Field(description="Tag name")],
        color: Annotated[str | None, Field(description="Tag color")] = None,
    ) -> str:
        body = {"name": name, **compact(color=color or None)}
        return json_result(await client.request_async("POST", "/leads/api/tags", body))

    @grinfi_tool(mcp, "update_tag", "Update a tag's name or color.")
    async def update_tag(
        uuid: Annotated[str, Field(description="UUID of the tag")],
        name: str | None = None,
        color: str | None = None,
    ) -> str:
        body = compact(name=name, color=color)
        return json_result(await client.request_async("PUT", api_path(TAG_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "delete_tag", "Delete a tag by UUID.")
    async def delete_tag(uuid: Annotated[str, Field(description="UUID of the tag to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(TAG_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "get_tag_metrics", "Get metrics (leads count, companies count) for specified tags.")
    async def get_tag_metrics(
        uuids: Annotated[list[str], Field(description="Array of tag UUIDs")],
        metrics: Annotated[list[Literal["leads_count", "companies_count"]], Field(description="Metrics to retrieve")],
    ) -> str:
        body = {"uuids": uuids, "metrics": metrics}
        return json_result(await client.request_async("POST", "/leads/api/tags/metrics", body))
