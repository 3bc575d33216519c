from __future__ import annotations

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from grinfi_common.errors import GrinfiAPIError
from tests.helpers.mcp_runtime import call_tool_json

CONTACT_URL = "https://leadgen.grinfi.io/crm/contacts/"


@pytest.mark.asyncio
async def test_find_contact_sends_only_given_fields_and_enriches(server, fake_client):
    fake_client.default = {"lead": {"uuid": "L1", "name": "Ann", "linkedin": "ann-smith"}}

    out = await call_tool_json(server, "find_contact", {"email": "ann@acme.io"})

    assert fake_client.last.method == "POST"
    assert fake_client.last.path == "/leads/api/leads/lookup-one"
    assert fake_client.last.body == {"email": "ann@acme.io"}
    assert out["lead"]["_grinfi_contact_url"] == CONTACT_URL + "L1"
    assert out["lead"]["_linkedin_url"] == "https://www.linkedin.com/in/ann-smith"


@pytest.mark.asyncio
async def test_search_contacts_body_and_enriched_page(server, fake_client):
    fake_client.default = {"data": [{"uuid": "L1"}, {"uuid": "L2", "linkedin": "bob"}], "total": 2}

    out = await call_tool_json(
        server,
        "search_contacts",
        {"filter": {"company_name": "Acme"}, "limit": 10, "order_type": "desc"},
    )

    assert fake_client.last.path == "/leads/api/leads/search"
    assert fake_client.last.body == {"filter": {"company_name": "Acme"}, "limit": 10, "order_type": "desc"}
    assert [c["_grinfi_contact_url"] for c in out["data"]] == [CONTACT_URL + "L1", CONTACT_URL + "L2"]
    assert out["total"] == 2


@pytest.mark.asyncio
async def test_get_contact_escapes_uuid(server, fake_client):
    await call_tool_json(server, "get_contact", {"uuid": "a/b"})
    assert fake_client.last.path == "/leads/api/leads/a%2Fb"


@pytest.mark.asyncio
async def test_update_contact_sends_only_changed_fields(server, fake_client):
    await call_tool_json(server, "update_contact", {"uuid": "L1", "position": "CTO"})

    assert fake_client.last.method == "PUT"
    assert fake_client.last.path == "/leads/api/leads/L1"
    assert fake_client.last.body == {"position": "CTO"}


@pytest.mark.asyncio
async def test_upsert_contact_nests_lead_fields(server, fake_client):
    fake_client.default = {"lead": {"uuid": "L9"}}

    out = await call_tool_json(
        server,
        "upsert_contact",
        {
            "list_uuid": "LIST",
            "linkedin_id": "ann-smith",
            "first_name": "Ann",
            "custom_fields": {"tier": "A"},
            "update_if_exists": True,
        },
    )

    assert fake_client.last.path == "/leads/api/leads/upsert"
    assert fake_client.last.body == {
        "lead": {"linkedin_id": "ann-smith", "first_name": "Ann"},
        "list_uuid": "LIST",
        "custom_fields": {"tier": "A"},
        "update_if_exists": True,
    }
    assert out["lead"]["_grinfi_contact_url"] == CONTACT_URL + "L9"


@pytest.mark.asyncio
async def test_change_pipeline_stage_is_a_mass_action(server, fake_client):
    await call_tool_json(
        server,
        "change_contact_pipeline_stage",
        {"contact_uuids": ["L1", "L2"], "pipeline_stage_uuid": "S1"},
    )

    assert fake_client.last.method == "PUT"
    assert fake_client.last.path == "/leads/api/leads/mass-action"
    assert fake_client.last.body == {
        "type": "contact_change_pipeline_stage",
        "filter": {"all": False, "ids": ["L1", "L2"], "excludeIds": []},
        "payload": {"pipeline_stage_uuid": "S1"},
    }


@pytest.mark.asyncio
async def test_delete_contact_is_not_enriched(server, fake_client):
    fake_client.default = {"success": True, "message": "Operation completed successfully (204 No Content)"}

    out = await call_tool_json(server, "delete_contact", {"uuid": "L1"})

    assert fake_client.last.method == "DELETE"
    assert out == {"success": True, "message": "Operation completed successfully (204 No Content)"}


@pytest.mark.asyncio
async def test_upstream_error_becomes_tool_error(server, fake_client):
    fake_client.routes[("GET", "/leads/api/leads/missing")] = GrinfiAPIError(404, '{"message":"Lead not found"}')

    with pytest.raises(ToolError, match="Grinfi API error 404"):
        await call_tool_json(server, "get_contact", {"uuid": "missing"})


@pytest.mark.asyncio
async def test_missing_required_argument_is_rejected(server, fake_client):
    with pytest.raises(ToolError):
        await call_tool_json(server, "get_contact", {})

    assert fake_client.calls == []
