from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

COMPANY_PATH = "/leads/api/companies/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(mcp, "list_companies", "List companies with pagination, sorting, and search.")
    async def list_companies(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/leads/api/companies", query=query))

    @grinfi_tool(mcp, "get_company", "Get a company by its UUID.")
    async def get_company(uuid: Annotated[str, Field(description="UUID of the company")]) -> str:
        return json_result(await client.request_async("GET", api_path(COMPANY_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp, "create_companies", "Create one or more companies. Optionally assign to lists and a data source."
    )
    async def create_companies(
        companies: Annotated[list[dict[str, Any]], Field(description="Array of company objects to create")],
        list_uuids: Annotated[list[str] | None, Field(description="Lists to add the companies to")] = None,
        data_source_uuid: Annotated[str | None, Field(description="Data source UUID")] = None,
    ) -> str:
        body = {"companies": companies, **compact(list_uuids=list_uuids, data_source_uuid=data_source_uuid or None)}
        return json_result(await client.request_async("POST", "/leads/api/companies", body))

    @grinfi_tool(mcp, "update_company", "Update a company's fields by UUID.")
    async def update_company(
        uuid: Annotated[str, Field(description="UUID of the company to update")],
        name: str | None = None,
        domain: str | None = None,
        website: str | None = None,
        linkedin: str | None = None,
        ln_id: int | None = None,
        phone: str | None = None,
        industry: str | None = None,
        employees_range: str | None = None,
        hq_raw_address: str | None = None,
        about: str | None = None,
        lead_status_uuid: str | None = None,
    ) -> str:
        body = compact(
            name=name,
            domain=domain,
            website=website,
            linkedin=linkedin,
            ln_id=ln_id,
            phone=phone,
            industry=industry,
            employees_range=employees_range,
            hq_raw_address=hq_raw_address,
            about=about,
            lead_status_uuid=lead_status_uuid,
        )
        return json_result(await client.request_async("PUT", api_path(COMPANY_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "delete_company", "Delete a company by UUID. This action is irreversible.")
    async def delete_company(uuid: Annotated[str, Field(description="UUID of the company to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(COMPANY_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp,
        "lookup_companies",
        "Lookup companies by LinkedIn ID, website, or name. Pass an array of lookup objects.",
    )
    async def lookup_companies(
        lookups: Annotated[list[dict[str, Any]], Field(description="Array of lookup criteria objects")],
    ) -> str:
        return json_result(await client.request_async("POST", "/leads/api/companies/lookup", {"lookups": lookups}))

    @grinfi_tool(mcp, "search_company_leads", "Get leads (contacts) belonging to specified companies.")
    async def search_company_leads(uuids: Annotated[list[str], Field(description="Array of company UUIDs")]) -> str:
        result = await client.request_async("POST", "/leads/api/companies/leads", {"uuids": uuids})
        return json_result(result, enrich=True)

    @grinfi_tool(
        mcp,
        "enrich_companies",
        "Trigger advanced enrichment for companies. Provide either a filter or an array of company UUIDs.",
    )
    async def enrich_companies(
        uuids: Annotated[list[str] | None, Field(description="Company UUIDs to enrich")] = None,
        filter: Annotated[dict[str, Any] | None, Field(description="Filter selecting companies to enrich")] = None,
    ) -> str:
        body = compact(uuids=uuids, filter=filter or None)
        return json_result(await client.request_async("POST", "/leads/api/companies/enrich", body))

    @grinfi_tool(
        mcp,
        "companies_mass_action",
        "Perform a mass action on companies. Types: assign_tag, remove_tag, move_to_list, change_pipeline_stage, "
        "delete, etc.",
    )
    async def companies_mass_action(
        type: Annotated[str, Field(description="Mass action type")],
        filter: Annotated[dict[str, Any], Field(description="Filter to select companies")],
        payload: Annotated[dict[str, Any] | None, Field(description="Action-specific payload")] = None,
    ) -> str:
        body = {"type": type, "filter": filter, **compact(payload=payload or None)}
        return json_result(await client.request_async("PUT", "/leads/api/companies/mass-action", body))
