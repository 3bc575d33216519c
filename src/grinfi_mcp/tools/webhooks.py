from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import compact, json_result
from grinfi_mcp.tools import grinfi_tool

WEBHOOK_PATH = "/leads/api/webhooks/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(mcp, "list_webhooks", "List all webhooks configured in your account.")
    async def list_webhooks() -> str:
        return json_result(await client.request_async("GET", "/leads/api/webhooks"))

    @grinfi_tool(mcp, "get_webhook", "Get a webhook by UUID.")
    async def get_webhook(uuid: Annotated[str, Field(description="UUID of the webhook")]) -> str:
        return json_result(await client.request_async("GET", api_path(WEBHOOK_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp,
        "create_webhook",
        "Create a new webhook. Specify the event to listen for and the target URL to call.",
    )
    async def create_webhook(
        name: Annotated[str, Field(description="Webhook name")],
        event: Annotated[
            str, Field(description="Event to trigger on (e.g. 'contact_exported', 'lead_created', 'lead_updated')")
        ],
        target_url: Annotated[str, Field(description="URL to send the webhook payload to")],
        request_method: Annotated[str | None, Field(description="HTTP method (default: POST)")] = None,
        filters: Annotated[str | None, Field(description="Optional filters")] = None,
    ) -> str:
        body = compact(
            name=name,
            event=event,
            target_url=target_url,
            request_method=request_method,
            filters=filters,
        )
        return json_result(await client.request_async("POST", "/leads/api/webhooks", body))

    @grinfi_tool(mcp, "update_webhook", "Update a webhook by UUID.")
    async def update_webhook(
        uuid: Annotated[str, Field(description="UUID of the webhook to update")],
        name: str | None = None,
        event: str | None = None,
        target_url: str | None = None,
        request_method: str | None = None,
        filters: str | None = None,
    ) -> str:
        body = compact(
            name=name,
            event=event,
            target_url=target_url,
            request_method=request_method,
            filters=filters,
        )
        return json_result(await client.request_async("PUT", api_path(WEBHOOK_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "delete_webhook", "Delete a webhook by UUID.")
    async def delete_webhook(uuid: Annotated[str, Field(description="UUID of the webhook to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(WEBHOOK_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "test_webhook", "Test a webhook by sending a test payload.")
    async def test_webhook(
        event: Annotated[str, Field(description="Event name to test")],
        target_url: Annotated[str, Field(description="Target URL to send the test to")],
        request_method: str | None = None,
        lead_uuid: str | None = None,
    ) -> str:
        body = compact(event=event, target_url=target_url, request_method=request_method, lead_uuid=lead_uuid)
        return json_result(await client.request_async("POST", "/leads/api/webhooks/test", body))

    @grinfi_tool(mcp, "get_webhook_metrics", "Get metrics for specified webhooks.")
    async def get_webhook_metrics(
        uuids: Annotated[list[str], Field(description="Array of webhook UUIDs")],
        metrics: Annotated[list[str] | None, Field(description="Metrics to retrieve")] = None,
    ) -> str:
        body = compact(uuids=uuids, metrics=metrics)
        return json_result(await client.request_async("POST", "/leads/api/webhooks/metrics", body))
