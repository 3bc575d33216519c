from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

MAILBOX_PATH = "/emails/api/mailboxes/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(
        mcp,
        "list_mailboxes",
        "List email mailboxes with pagination, sorting, and search. Shows all configured SMTP/IMAP/Gmail/Outlook "
        "mailboxes.",
    )
    async def list_mailboxes(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/emails/api/mailboxes", query=query))

    @grinfi_tool(
        mcp,
        "get_mailbox",
        "Get a specific mailbox by UUID. Shows connection settings, status, sending limits, etc.",
    )
    async def get_mailbox(uuid: Annotated[str, Field(description="UUID of the mailbox")]) -> str:
        return json_result(await client.request_async("GET", api_path(MAILBOX_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp,
        "create_mailbox",
        "Create a new SMTP/IMAP mailbox. Provide email, sender name, connection settings.",
    )
    async def create_mailbox(
        email: Annotated[str, Field(description="Email address for the mailbox")],
        sender_name: Annotated[str, Field(description="Display name for outgoing emails")],
        sender_profile_uuid: Annotated[str, Field(description="UUID of the sender profile to associate with")],
        provider: str | None = None,
        connection_settings: dict[str, Any] | None = None,
        automation_daily_limit: int | None = None,
        automation_task_interval: int | None = None,
    ) -> str:
        body = compact(
            email=email,
            sender_name=sender_name,
            sender_profile_uuid=sender_profile_uuid,
            provider=provider,
            connection_settings=connection_settings,
            automation_daily_limit=automation_daily_limit,
            automation_task_interval=automation_task_interval,
        )
        return json_result(await client.request_async("POST", "/emails/api/mailboxes", body))

    @grinfi_tool(
        mcp,
        "update_mailbox",
        "Update a mailbox by UUID. Can change sender name, connection settings, daily limits, etc.",
    )
    async def update_mailbox(
        uuid: Annotated[str, Field(description="UUID of the mailbox to update")],
        sender_name: str | None = None,
        connection_settings: dict[str, Any] | None = None,
        automation_daily_limit: int | None = None,
        automation_task_interval: int | None = None,
        custom_tracking_domain_uuid: str | None = None,
    ) -> str:
        body = compact(
            sender_name=sender_name,
            connection_settings=connection_settings,
            automation_daily_limit=automation_daily_limit,
            automation_task_interval=automation_task_interval,
            custom_tracking_domain_uuid=custom_tracking_domain_uuid,
        )
        return json_result(await client.request_async("PUT", api_path(MAILBOX_PATH, uuid=uuid), body))

    @grinfi_tool(
        mcp,
        "delete_mailbox",
        "Delete a mailbox by UUID. Optionally reassign automations to another mailbox.",
    )
    async def delete_mailbox(
        uuid: Annotated[str, Field(description="UUID of the mailbox to delete")],
        automation_reassign_mailboxes: Annotated[
            bool, Field(description="Whether to reassign automations using this mailbox")
        ],
        automation_mailbox_to_reassign: Annotated[
            str | None, Field(description="UUID of the mailbox that takes over the automations")
        ] = None,
    ) -> str:
        body = {
            "automation_reassign_mailboxes": automation_reassign_mailboxes,
            **compact(automation_mailbox_to_reassign=automation_mailbox_to_reassign or None),
        }
        return json_result(await client.request_async("DELETE", api_path(MAILBOX_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "activate_mailbox", "Activate a mailbox so it can send and sync emails.")
    async def activate_mailbox(uuid: Annotated[str, Field(description="UUID of the mailbox to activate")]) -> str:
        return json_result(await client.request_async("PUT", api_path(MAILBOX_PATH + "/activate", uuid=uuid)))

    @grinfi_tool(mcp, "deactivate_mailbox", "Deactivate a mailbox to stop sending and syncing.")
    async def deactivate_mailbox(
        uuid: Annotated[str, Field(description="UUID of the mailbox to deactivate")],
    ) -> str:
        return json_result(await client.request_async("PUT", api_path(MAILBOX_PATH + "/deactivate", uuid=uuid)))

    @grinfi_tool(
        mcp,
        "list_mailbox_errors",
        "List mailbox errors for debugging. Shows send/sync errors with timestamps and details.",
    )
    async def list_mailbox_errors(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/emails/api/mailbox-errors", query=query))

    # Custom tracking domains

    @grinfi_tool(
        mcp,
        "list_custom_tracking_domains",
        "List custom tracking domains used for email link/open tracking.",
    )
    async def list_custom_tracking_domains(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type)
        return json_result(await client.request_async("GET", "/emails/api/custom-tracking-domains", query=query))

    @grinfi_tool(
        mcp,
        "get_custom_tracking_domain",
        "Get a custom tracking domain by UUID. Shows DNS status (CNAME, DKIM, SPF, DMARC).",
    )
    async def get_custom_tracking_domain(
        uuid: Annotated[str, Field(description="UUID of the custom tracking domain")],
    ) -> str:
        path = api_path("/emails/api/custom-tracking-domains/{uuid}", uuid=uuid)
        return json_result(await client.request_async("GET", path))

    @grinfi_tool(mcp, "create_custom_tracking_domain", "Create a new custom tracking domain for email tracking.")
    async def create_custom_tracking_domain(
        domain: Annotated[str, Field(description="The custom tracking domain (e.g. 'track.yourcompany.com')")],
    ) -> str:
        body = {"domain": domain}
        return json_result(await client.request_async("POST", "/emails/api/custom-tracking-domains", body))
