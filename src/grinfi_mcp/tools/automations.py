from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

FLOW_PATH = "/flows/api/flows/{flow_uuid}"

FlowUuid = Annotated[str, Field(description="UUID of the automation")]


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    async def _flow_action(flow_uuid: str, action: str) -> str:
        path = api_path(FLOW_PATH + "/" + action, flow_uuid=flow_uuid)
        return json_result(await client.request_async("PUT", path))

    @grinfi_tool(mcp, "list_automations", "Get all automations (flows). Supports pagination, sorting, and search.")
    async def list_automations(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/flows/api/flows", query=query))

    @grinfi_tool(mcp, "get_automation", "Get a specific automation (flow) by UUID with full details.")
    async def get_automation(flow_uuid: FlowUuid) -> str:
        return json_result(await client.request_async("GET", api_path(FLOW_PATH, flow_uuid=flow_uuid)))

    @grinfi_tool(mcp, "get_automation_metrics", "Get metrics for specified automations (flows).")
    async def get_automation_metrics(
        uuids: Annotated[list[str], Field(description="Array of automation UUIDs")],
    ) -> str:
        return json_result(await client.request_async("POST", "/flows/api/flows/metrics", {"uuids": uuids}))

    @grinfi_tool(mcp, "start_automation", "Start an automation (flow) by UUID.")
    async def start_automation(flow_uuid: FlowUuid) -> str:
        return await _flow_action(flow_uuid, "start")

    @grinfi_tool(mcp, "stop_automation", "Stop a running automation (flow) by UUID.")
    async def stop_automation(flow_uuid: FlowUuid) -> str:
        return await _flow_action(flow_uuid, "stop")

    @grinfi_tool(mcp, "archive_automation", "Archive an automation (flow).")
    async def archive_automation(
        flow_uuid: Annotated[str, Field(description="UUID of the automation to archive")],
    ) -> str:
        return await _flow_action(flow_uuid, "archive")

    @grinfi_tool(mcp, "unarchive_automation", "Unarchive a previously archived automation (flow).")
    async def unarchive_automation(
        flow_uuid: Annotated[str, Field(description="UUID of the automation to unarchive")],
    ) -> str:
        return await _flow_action(flow_uuid, "unarchive")

    @grinfi_tool(mcp, "delete_automation", "Delete an automation (flow) by UUID. This action is irreversible.")
    async def delete_automation(
        flow_uuid: Annotated[str, Field(description="UUID of the automation to delete")],
    ) -> str:
        return json_result(await client.request_async("DELETE", api_path(FLOW_PATH, flow_uuid=flow_uuid)))

    @grinfi_tool(mcp, "clone_automation", "Clone an existing automation (flow). Creates a copy with a new name.")
    async def clone_automation(
        flow_uuid: Annotated[str, Field(description="UUID of the automation to clone")],
        name: Annotated[str, Field(description="Name for the cloned automation")],
        flow_workspace_uuid: Annotated[str | None, Field(description="Workspace UUID for the clone")] = None,
    ) -> str:
        body = {"name": name, **compact(flow_workspace_uuid=flow_workspace_uuid or None)}
        path = api_path(FLOW_PATH + "/clone", flow_uuid=flow_uuid)
        return json_result(await client.request_async("POST", path, body))

    @grinfi_tool(
        mcp,
        "update_automation",
        "Update an automation (flow) by UUID. Can update name, description, schedule, etc.",
    )
    async def update_automation(
        flow_uuid: Annotated[str, Field(description="UUID of the automation to update")],
        name: Annotated[str | None, Field(description="New automation name")] = None,
        description: Annotated[str | None, Field(description="New description")] = None,
        schedule: Annotated[dict[str, Any] | None, Field(description="Schedule configuration")] = None,
    ) -> str:
        body = compact(name=name, description=description, schedule=schedule)
        return json_result(await client.request_async("PUT", api_path(FLOW_PATH, flow_uuid=flow_uuid), body))

    @grinfi_tool(mcp, "add_contact_to_automation", "Add an existing contact to an automation by their UUIDs.")
    async def add_contact_to_automation(
        flow_uuid: FlowUuid,
        lead_uuid: Annotated[str, Field(description="UUID of the contact")],
    ) -> str:
        path = api_path(FLOW_PATH + "/leads/{lead_uuid}", flow_uuid=flow_uuid, lead_uuid=lead_uuid)
        return json_result(await client.request_async("POST", path))

    @grinfi_tool(
        mcp, "add_new_contact_to_automation", "Create a new contact and immediately add them to an automation."
    )
    async def add_new_contact_to_automation(
        flow_uuid: FlowUuid,
        list_uuid: Annotated[str, Field(description="UUID of the list the contact is created in")],
        linkedin_id: Annotated[str, Field(description="LinkedIn ID or profile URL")],
        first_name: str | None = None,
        last_name: str | None = None,
        company_name: str | None = None,
        email: str | None = None,
        headline: str | None = None,
        position: str | None = None,
        raw_address: str | None = None,
        custom_fields: dict[str, Any] | None = None,
        update_lead_if_exists: bool | None = None,
        move_to_list: bool | None = None,
        flow_segment_id: int | None = None,
        skip_if_lead_exists: bool | None = None,
    ) -> str:
        lead = compact(
            linkedin_id=linkedin_id,
            first_name=first_name,
            last_name=last_name,
            company_name=company_name,
            email=email,
            headline=headline,
            position=position,
            raw_address=raw_address,
        )
        body = {
            "lead": lead,
            "list_uuid": list_uuid,
            **compact(
                custom_fields=custom_fields or None,
                update_lead_if_exists=update_lead_if_exists,
                move_to_list=move_to_list,
                flow_segment_id=flow_segment_id,
                skip_if_lead_exists=skip_if_lead_exists,
            ),
        }
        path = api_path(FLOW_PATH + "/add-new-lead", flow_uuid=flow_uuid)
        return json_result(await client.request_async("POST", path, body))

    @grinfi_tool(mcp, "cancel_contact_from_automations", "Cancel a contact from specific automations.")
    async def cancel_contact_from_automations(
        lead_uuid: Annotated[str, Field(description="UUID of the contact")],
        flow_uuids: Annotated[list[str], Field(description="Automations to cancel the contact from")],
    ) -> str:
        path = api_path("/flows/api/flows/leads/{lead_uuid}/cancel", lead_uuid=lead_uuid)
        return json_result(await client.request_async("PUT", path, {"flow_uuids": flow_uuids}))

    @grinfi_tool(mcp, "cancel_contact_from_all_automations", "Cancel a contact from ALL active automations.")
    async def cancel_contact_from_all_automations(
        lead_uuid: Annotated[str, Field(description="UUID of the contact")],
    ) -> str:
        path = api_path("/flows/api/flows/leads/{lead_uuid}/cancel-all", lead_uuid=lead_uuid)
        return json_result(await client.request_async("PUT", path))

    @grinfi_tool(mcp, "continue_automation", "Continue (resume) an automation for a specific contact.")
    async def continue_automation(lead_uuid: Annotated[str, Field(description="UUID of the contact")]) -> str:
        body = {"lead_uuid": lead_uuid}
        return json_result(await client.request_async("PUT", "/flows/api/tasks/continue-automation", body))
