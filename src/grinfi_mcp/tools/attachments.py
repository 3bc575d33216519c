from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, grinfi_tool

ATTACHMENT_PATH = "/leads/api/attachments/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(mcp, "list_attachments", "List attachments with pagination and sorting.")
    async def list_attachments(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type)
        return json_result(await client.request_async("GET", "/leads/api/attachments", query=query))

    @grinfi_tool(mcp, "get_attachment", "Get an attachment by UUID.")
    async def get_attachment(uuid: Annotated[str, Field(description="UUID of the attachment")]) -> str:
        return json_result(await client.request_async("GET", api_path(ATTACHMENT_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "delete_attachment", "Delete an attachment by UUID.")
    async def delete_attachment(uuid: Annotated[str, Field(description="UUID of the attachment to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(ATTACHMENT_PATH, uuid=uuid)))

    # Enrichment queue

    @grinfi_tool(mcp, "list_enrichment_queue", "List enrichment queue entries with pagination.")
    async def list_enrichment_queue(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type)
        return json_result(await client.request_async("GET", "/leads/api/enrichment-queue", query=query))

    @grinfi_tool(mcp, "get_enrichment_metrics", "Get enrichment queue metrics (e.g. this month's enrichment count).")
    async def get_enrichment_metrics() -> str:
        return json_result(await client.request_async("GET", "/leads/api/enrichment-queue/metrics"))
