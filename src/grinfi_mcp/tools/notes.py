from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, ObjectType, Offset, OrderField, OrderType, grinfi_tool

NOTE_PATH = "/leads/api/notes/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    # Notes

    @grinfi_tool(
        mcp, "list_notes", "List notes with pagination and sorting. Notes can be attached to leads or companies."
    )
    async def list_notes(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type)
        return json_result(await client.request_async("GET", "/leads/api/notes", query=query))

    @grinfi_tool(mcp, "get_note", "Get a note by its UUID.")
    async def get_note(uuid: Annotated[str, Field(description="UUID of the note")]) -> str:
        return json_result(await client.request_async("GET", api_path(NOTE_PATH, uuid=uuid)))

    @grinfi_tool(mcp, "create_note", "Create a note on a lead or company.")
    async def create_note(
        object: Annotated[ObjectType, Field(description="Object type")],
        object_uuid: Annotated[str, Field(description="UUID of the lead or company")],
        note: Annotated[str, Field(description="Note text content")],
    ) -> str:
        body = {"object": object, "object_uuid": object_uuid, "note": note}
        return json_result(await client.request_async("POST", "/leads/api/notes", body))

    @grinfi_tool(mcp, "update_note", "Update a note's text.")
    async def update_note(
        uuid: Annotated[str, Field(description="UUID of the note")],
        note: Annotated[str, Field(description="Updated note text")],
    ) -> str:
        return json_result(await client.request_async("PUT", api_path(NOTE_PATH, uuid=uuid), {"note": note}))

    @grinfi_tool(mcp, "delete_note", "Delete a note by UUID.")
    async def delete_note(uuid: Annotated[str, Field(description="UUID of the note to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(NOTE_PATH, uuid=uuid)))

    # Activities

    @grinfi_tool(
        mcp,
        "list_activities",
        "List activities for leads or companies. Activities track events like messages sent, emails opened, etc.",
    )
    async def list_activities(
        object: Annotated[ObjectType | None, Field(description="Filter by object type")] = None,
        filter: Annotated[str | None, Field(description="Free-text filter")] = None,
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search=filter, object=object)
        return json_result(await client.request_async("GET", "/leads/api/activities", query=query))

    @grinfi_tool(mcp, "create_activity", "Create a new activity record for a lead or company.")
    async def create_activity(
        object_uuid: Annotated[str, Field(description="UUID of the lead or company")],
        object_type: Annotated[ObjectType, Field(description="Object type")],
        type: Annotated[str, Field(description="Activity type (e.g. 'linkedin_message_sent', 'email_sent')")],
        payload: Annotated[dict[str, Any] | None, Field(description="Activity payload")] = None,
    ) -> str:
        body = compact(object_uuid=object_uuid, object_type=object_type, type=type, payload=payload)
        return json_result(await client.request_async("POST", "/leads/api/activities", body))
