from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import compact, json_result
from grinfi_mcp.tools import OrderType, grinfi_tool

MASS_ACTION_PATH = "/leads/api/leads/mass-action"


def ids_filter(ids: list[str]) -> dict[str, Any]:
    """Mass-action filter selecting exactly `ids`."""
    return {"all": False, "ids": list(ids), "excludeIds": []}


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(
        mcp,
        "find_contact",
        "Find a single contact by LinkedIn ID, email, or name + company. You must provide at least one: "
        "linkedin_id, email, or both name and company_name. Results include _grinfi_contact_url "
        "(https://leadgen.grinfi.io/crm/contacts/{uuid}) and _linkedin_url. The Grinfi messenger is at "
        "https://leadgen.grinfi.io/messenger/",
    )
    async def find_contact(
        linkedin_id: Annotated[str | None, Field(description="LinkedIn profile URL or ID")] = None,
        email: Annotated[str | None, Field(description="Email address")] = None,
        name: Annotated[str | None, Field(description="Contact's full name")] = None,
        company_name: Annotated[str | None, Field(description="Company name")] = None,
        disable_aggregation: Annotated[bool | None, Field(description="Disable data aggregation")] = None,
    ) -> str:
        body = compact(
            linkedin_id=linkedin_id or None,
            email=email or None,
            name=name or None,
            company_name=company_name or None,
            disable_aggregation=disable_aggregation,
        )
        result = await client.request_async("POST", "/leads/api/leads/lookup-one", body)
        return json_result(result, enrich=True)

    @grinfi_tool(
        mcp,
        "search_contacts",
        "Search contacts with filters, sorting, and pagination. Filter supports: scalar values (equals), "
        "arrays (IN), objects with operators (>=, <=, >, <, =, !=, <>), 'is_null', 'is_not_null'. Results "
        "include _grinfi_contact_url (https://leadgen.grinfi.io/crm/contacts/{uuid}) and _linkedin_url for "
        "each contact.",
    )
    async def search_contacts(
        filter: Annotated[dict[str, Any] | None, Field(description="Filter object")] = None,
        limit: Annotated[int | None, Field(description="Number of results to return (default 20)")] = None,
        offset: Annotated[int | None, Field(description="Number of results to skip (default 0)")] = None,
        order_field: Annotated[str | None, Field(description="Field to sort by (default: created_at)")] = None,
        order_type: OrderType = None,
        disable_aggregation: Annotated[bool | None, Field(description="Disable data aggregation")] = None,
    ) -> str:
        body = compact(
            filter=filter or None,
            limit=limit,
            offset=offset,
            order_field=order_field or None,
            order_type=order_type,
            disable_aggregation=disable_aggregation,
        )
        result = await client.request_async("POST", "/leads/api/leads/search", body)
        return json_result(result, enrich=True)

    @grinfi_tool(mcp, "get_contact", "Get a contact by their UUID.")
    async def get_contact(uuid: Annotated[str, Field(description="UUID of the contact")]) -> str:
        result = await client.request_async("GET", api_path("/leads/api/leads/{uuid}", uuid=uuid))
        return json_result(result, enrich=True)

    @grinfi_tool(
        mcp,
        "update_contact",
        "Update a contact's fields by UUID. To change pipeline stage, use change_contact_pipeline_stage tool instead.",
    )
    async def update_contact(
        uuid: Annotated[str, Field(description="UUID of the contact to update")],
        first_name: Annotated[str | None, Field(description="First name")] = None,
        last_name: Annotated[str | None, Field(description="Last name")] = None,
        company_name: Annotated[str | None, Field(description="Company name")] = None,
        ln_id: Annotated[str | None, Field(description="LinkedIn member ID")] = None,
        sn_id: Annotated[str | None, Field(description="Sales Navigator ID")] = None,
        linkedin: Annotated[str | None, Field(description="LinkedIn profile handle")] = None,
        email: Annotated[str | None, Field(description="Email address")] = None,
        about: Annotated[str | None, Field(description="Description / about text")] = None,
        domain: Annotated[str | None, Field(description="Company domain for email finding")] = None,
        headline: Annotated[str | None, Field(description="LinkedIn headline")] = None,
        position: Annotated[str | None, Field(description="Job position/title")] = None,
        raw_address: Annotated[str | None, Field(description="Location address string")] = None,
    ) -> str:
        body = compact(
            first_name=first_name,
            last_name=last_name,
            company_name=company_name,
            ln_id=ln_id,
            sn_id=sn_id,
            linkedin=linkedin,
            email=email,
            about=about,
            domain=domain,
            headline=headline,
            position=position,
            raw_address=raw_address,
        )
        result = await client.request_async("PUT", api_path("/leads/api/leads/{uuid}", uuid=uuid), body)
        return json_result(result, enrich=True)

    @grinfi_tool(mcp, "delete_contact", "Delete a contact by UUID. This action is irreversible.")
    async def delete_contact(uuid: Annotated[str, Field(description="UUID of the contact to delete")]) -> str:
        result = await client.request_async("DELETE", api_path("/leads/api/leads/{uuid}", uuid=uuid))
        return json_result(result)

    @grinfi_tool(
        mcp,
        "upsert_contact",
        "Create a new contact or update an existing one. The contact is placed into the specified list.",
    )
    async def upsert_contact(
        list_uuid: Annotated[str, Field(description="UUID of the target list")],
        linkedin_id: Annotated[str, Field(description="LinkedIn ID or profile URL (required)")],
        first_name: str | None = None,
        last_name: str | None = None,
        company_name: str | None = None,
        ln_id: str | None = None,
        sn_id: str | None = None,
        linkedin: str | None = None,
        email: str | None = None,
        about: str | None = None,
        domain: str | None = None,
        headline: str | None = None,
        position: str | None = None,
        raw_address: str | None = None,
        custom_fields: Annotated[dict[str, Any] | None, Field(description="Custom fields as key-value pairs")] = None,
        update_if_exists: bool | None = None,
        move_to_list: bool | None = None,
    ) -> str:
        lead = compact(
            linkedin_id=linkedin_id,
            first_name=first_name,
            last_name=last_name,
            company_name=company_name,
            ln_id=ln_id,
            sn_id=sn_id,
            linkedin=linkedin,
            email=email,
            about=about,
            domain=domain,
            headline=headline,
            position=position,
            raw_address=raw_address,
        )
        body = {"lead": lead, "list_uuid": list_uuid}
        body.update(
            compact(
                custom_fields=custom_fields or None,
                update_if_exists=update_if_exists,
                move_to_list=move_to_list,
            )
        )
        result = await client.request_async("POST", "/leads/api/leads/upsert", body)
        return json_result(result, enrich=True)

    @grinfi_tool(
        mcp,
        "change_contact_pipeline_stage",
        "Change the pipeline stage of one or more contacts. Use list_pipeline_stages to get available stage UUIDs first.",
    )
    async def change_contact_pipeline_stage(
        contact_uuids: Annotated[list[str], Field(description="Array of contact UUIDs to change")],
        pipeline_stage_uuid: Annotated[str, Field(description="UUID of the target pipeline stage")],
    ) -> str:
        body = {
            "type": "contact_change_pipeline_stage",
            "filter": ids_filter(contact_uuids),
            "payload": {"pipeline_stage_uuid": pipeline_stage_uuid},
        }
        result = await client.request_async("PUT", MASS_ACTION_PATH, body)
        return json_result(result)

    @grinfi_tool(
        mcp,
        "leads_mass_action",
        "Perform a mass action on leads. Types: contact_change_pipeline_stage, contact_mark_read, etc. "
        "For pipeline stage changes prefer change_contact_pipeline_stage tool.",
    )
    async def leads_mass_action(
        type: Annotated[
            str, Field(description="Mass action type (e.g. 'contact_change_pipeline_stage', 'contact_mark_read')")
        ],
        filter: Annotated[dict[str, Any], Field(description="Filter to select leads")],
        payload: Annotated[dict[str, Any] | None, Field(description="Action-specific payload")] = None,
    ) -> str:
        body = {"type": type, "filter": filter, **compact(payload=payload or None)}
        result = await client.request_async("PUT", MASS_ACTION_PATH, body)
        return json_result(result)
