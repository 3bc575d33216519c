from mcp.server.fastmcp import FastMCP

from grinfi_mcp.client import GrinfiClient
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    @grinfi_tool(mcp, "list_leads_blacklist", "List blacklisted leads with pagination and sorting.")
    async def list_leads_blacklist(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/leads/api/blacklist/leads", query=query))

    @grinfi_tool(mcp, "add_to_leads_blacklist", "Add a lead to the blacklist.")
    async def add_to_leads_blacklist(
        name: str | None = None,
        linkedin: str | None = None,
        ln_id: str | None = None,
        personal_email: str | None = None,
        work_email: str | None = None,
        company_name: str | None = None,
    ) -> str:
        body = compact(
            name=name,
            linkedin=linkedin,
            ln_id=ln_id,
            personal_email=personal_email,
            work_email=work_email,
            company_name=company_name,
        )
        return json_result(await client.request_async("POST", "/leads/api/blacklist/leads", body))

    @grinfi_tool(mcp, "list_companies_blacklist", "List blacklisted companies with pagination and sorting.")
    async def list_companies_blacklist(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/leads/api/blacklist/companies", query=query))

    @grinfi_tool(mcp, "add_to_companies_blacklist", "Add a company to the blacklist.")
    async def add_to_companies_blacklist(
        name: str | None = None,
        domain: str | None = None,
        linkedin: str | None = None,
        ln_id: str | None = None,
    ) -> str:
        body = compact(name=name, domain=domain, linkedin=linkedin, ln_id=ln_id)
        return json_result(await client.request_async("POST", "/leads/api/blacklist/companies", body))
