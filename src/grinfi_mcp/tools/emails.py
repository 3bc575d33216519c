from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

EMAIL_PATH = "/emails/api/emails/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(
        mcp, "list_emails", "List emails from the unified inbox. Supports filters, pagination, and sorting."
    )
    async def list_emails(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
        lead_uuid: str | None = None,
        sender_profile_uuid: str | None = None,
        status: str | None = None,
        type: str | None = None,
    ) -> str:
        query = build_query(
            limit,
            offset,
            order_field,
            order_type,
            search,
            lead_uuid=lead_uuid,
            sender_profile_uuid=sender_profile_uuid,
            status=status,
            type=type,
        )
        return json_result(await client.request_async("GET", "/emails/api/emails", query=query))

    @grinfi_tool(
        mcp,
        "get_email",
        "Get a specific email by UUID. Returns full email details including from/to, subject, status, timestamps.",
    )
    async def get_email(uuid: Annotated[str, Field(description="UUID of the email")]) -> str:
        return json_result(await client.request_async("GET", api_path(EMAIL_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "send_email", "Send an email to a contact.")
    async def send_email(
        sender_profile_uuid: Annotated[str, Field(description="UUID of the sending profile")],
        lead_uuid: Annotated[str, Field(description="UUID of the recipient contact")],
        from_name: str,
        from_email: str,
        to_name: str,
        to_email: str,
        subject: str,
        cc: list[str] | None = None,
        bcc: list[str] | None = None,
    ) -> str:
        body = {
            "sender_profile_uuid": sender_profile_uuid,
            "lead_uuid": lead_uuid,
            "from_name": from_name,
            "from_email": from_email,
            "to_name": to_name,
            "to_email": to_email,
            "subject": subject,
            **compact(cc=cc, bcc=bcc),
        }
        return json_result(await client.request_async("POST", "/emails/api/emails/send-email", body))

    @grinfi_tool(mcp, "delete_email", "Delete an email by UUID.")
    async def delete_email(uuid: Annotated[str, Field(description="UUID of the email to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(EMAIL_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "get_email_body", "Get an email body (HTML content, subject, attachments) by UUID.")
    async def get_email_body(uuid: Annotated[str, Field(description="UUID of the email body")]) -> str:
        path = api_path("/emails/api/email-bodies/{uuid}", uuid=uuid)
        return json_result(await client.request_async("GET", path))

    @grinfi_tool(mcp, "list_email_bodies", "List email bodies (HTML content) with pagination and sorting.")
    async def list_email_bodies(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/emails/api/email-bodies", query=query))

    @grinfi_tool(mcp, "get_email_thread", "Render the email conversation thread for a reply email.")
    async def get_email_thread(
        reply_to_email_uuid: Annotated[str, Field(description="UUID of the reply email to render thread for")],
    ) -> str:
        path = api_path(EMAIL_PATH + "/thread", uuid=reply_to_email_uuid)
        return json_result(await client.request_async("GET", path))

    @grinfi_tool(
        mcp,
        "get_email_llm_thread",
        "Get an email conversation thread formatted for LLM processing. Optimized for AI analysis and response "
        "generation.",
    )
    async def get_email_llm_thread(
        sender_profile_uuid: Annotated[str, Field(description="UUID of the sender profile")],
        lead_uuid: Annotated[str, Field(description="UUID of the contact")],
        lead_name: Annotated[str, Field(description="Name of the contact (for personalization)")],
        limit: Annotated[str | None, Field(description="Maximum number of emails in the thread")] = None,
        sent_at_recency_in_days: Annotated[int | None, Field(description="Only include recent emails")] = None,
    ) -> str:
        body = {
            "sender_profile_uuid": sender_profile_uuid,
            "lead_uuid": lead_uuid,
            "lead_name": lead_name,
            **compact(limit=limit or None, sent_at_recency_in_days=sent_at_recency_in_days),
        }
        return json_result(await client.request_async("POST", "/emails/api/emails/llm-thread", body))

    @grinfi_tool(mcp, "get_latest_emails_by_leads", "Get the latest email for each of the specified lead UUIDs.")
    async def get_latest_emails_by_leads(
        lead_uuids: Annotated[list[str], Field(description="Array of lead UUIDs to get latest emails for")],
    ) -> str:
        body = {"lead_uuids": lead_uuids}
        return json_result(await client.request_async("POST", "/emails/api/emails/latest-by-leads", body))
