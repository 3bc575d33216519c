from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_config.settings import unread_concurrency
from grinfi_mcp import unread
from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool
from grinfi_mcp.tools.contacts import MASS_ACTION_PATH, ids_filter

MESSAGE_PATH = "/flows/api/linkedin-messages/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(
        mcp,
        "list_linkedin_messages",
        "List LinkedIn messages from the unified inbox. Supports filters, pagination, and sorting. Set type to "
        "'inbox' for received messages, 'outbox' for sent. For UNREAD conversations, use the "
        "'get_unread_conversations' tool instead.",
    )
    async def list_linkedin_messages(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
        lead_uuid: str | None = None,
        sender_profile_uuid: str | None = None,
        linkedin_account_uuid: str | None = None,
        linkedin_conversation_uuid: str | None = None,
        status: str | None = None,
        type: Annotated[str | None, Field(description="'inbox' for received, 'outbox' for sent")] = None,
        user_id: str | None = None,
    ) -> str:
        query = build_query(
            limit,
            offset,
            order_field,
            order_type,
            search,
            lead_uuid=lead_uuid,
            sender_profile_uuid=sender_profile_uuid,
            linkedin_account_uuid=linkedin_account_uuid,
            linkedin_conversation_uuid=linkedin_conversation_uuid,
            status=status,
            type=type,
            user_id=user_id,
        )
        return json_result(await client.request_async("GET", unread.MESSAGES_PATH, query=query))

    @grinfi_tool(
        mcp,
        "get_unread_conversations",
        "Get contacts that have unread LinkedIn or email messages. This fetches recent inbox messages, then checks "
        "each contact's unread_counts field. Returns a list of contacts with unread messages and the latest message "
        "from each. Use this when the user asks about unread or new messages.",
    )
    async def get_unread_conversations(
        limit: Annotated[
            int | None, Field(description="How many recent inbox messages to scan (default 300, max 1000)")
        ] = None,
        sender_profile_uuid: Annotated[str | None, Field(description="Filter by sender profile UUID")] = None,
    ) -> str:
        result = await unread.get_unread_conversations(
            client,
            limit,
            sender_profile_uuid or None,
            concurrency=unread_concurrency(),
        )
        return json_result(result)

    @grinfi_tool(
        mcp,
        "mark_conversation_as_read",
        "Mark a LinkedIn conversation as read in Grinfi. This updates the unread counter in the Grinfi interface.",
    )
    async def mark_conversation_as_read(
        lead_uuid: Annotated[str, Field(description="UUID of the contact (lead) whose conversation to mark as read")],
    ) -> str:
        body = {"type": "contact_mark_read", "filter": ids_filter([lead_uuid])}
        return json_result(await client.request_async("PUT", MASS_ACTION_PATH, body))

    @grinfi_tool(mcp, "send_linkedin_message", "Send a LinkedIn message to a contact.")
    async def send_linkedin_message(
        sender_profile_uuid: Annotated[str, Field(description="UUID of the sending profile")],
        lead_uuid: Annotated[str, Field(description="UUID of the recipient contact")],
        text: Annotated[str, Field(description="Message text")],
        template_uuid: Annotated[str | None, Field(description="Template to render the message from")] = None,
    ) -> str:
        body = {
            "sender_profile_uuid": sender_profile_uuid,
            "lead_uuid": lead_uuid,
            "text": text,
            **compact(template_uuid=template_uuid or None),
        }
        return json_result(await client.request_async("POST", unread.MESSAGES_PATH, body))

    @grinfi_tool(mcp, "delete_linkedin_message", "Delete a LinkedIn message by UUID.")
    async def delete_linkedin_message(
        uuid: Annotated[str, Field(description="UUID of the LinkedIn message to delete")],
    ) -> str:
        return json_result(await client.request_async("DELETE", api_path(MESSAGE_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "retry_linkedin_message", "Retry sending a failed LinkedIn message.")
    async def retry_linkedin_message(
        uuid: Annotated[str, Field(description="UUID of the LinkedIn message to retry")],
    ) -> str:
        return json_result(await client.request_async("PUT", api_path(MESSAGE_PATH + "/retry", uuid=uuid)))
