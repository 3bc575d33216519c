from __future__ import annotations

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from tests.helpers.mcp_runtime import call_tool_json


@pytest.mark.asyncio
async def test_get_list_metrics(server, fake_client):
    await call_tool_json(server, "get_list_metrics", {"uuids": ["L1", "L2"]})

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/leads/api/lists/metrics")
    assert fake_client.last.body == {"uuids": ["L1", "L2"]}


@pytest.mark.asyncio
async def test_list_lists_query(server, fake_client):
    await call_tool_json(server, "list_lists", {"limit": 10, "offset": 20, "order_field": "name", "search": "q4"})

    assert (fake_client.last.method, fake_client.last.path) == ("GET", "/leads/api/lists")
    assert fake_client.last.query == {"limit": "10", "offset": "20", "order_field": "name", "filter[q]": "q4"}
    assert fake_client.last.body is None


@pytest.mark.asyncio
async def test_update_company_keeps_integer_ln_id(server, fake_client):
    await call_tool_json(server, "update_company", {"uuid": "C1", "ln_id": 123456, "industry": "SaaS"})

    assert (fake_client.last.method, fake_client.last.path) == ("PUT", "/leads/api/companies/C1")
    assert fake_client.last.body == {"ln_id": 123456, "industry": "SaaS"}
    assert isinstance(fake_client.last.body["ln_id"], int)


@pytest.mark.asyncio
async def test_get_tag_metrics(server, fake_client):
    await call_tool_json(server, "get_tag_metrics", {"uuids": ["T1"], "metrics": ["leads_count", "companies_count"]})

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/leads/api/tags/metrics")
    assert fake_client.last.body == {"uuids": ["T1"], "metrics": ["leads_count", "companies_count"]}


@pytest.mark.asyncio
async def test_list_leads_blacklist_search(server, fake_client):
    await call_tool_json(server, "list_leads_blacklist", {"search": "acme", "limit": 50})

    assert (fake_client.last.method, fake_client.last.path) == ("GET", "/leads/api/blacklist/leads")
    assert fake_client.last.query == {"limit": "50", "filter[q]": "acme"}


@pytest.mark.asyncio
async def test_add_to_companies_blacklist_body(server, fake_client):
    await call_tool_json(server, "add_to_companies_blacklist", {"domain": "acme.io"})

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/leads/api/blacklist/companies")
    assert fake_client.last.body == {"domain": "acme.io"}


@pytest.mark.asyncio
async def test_create_webhook(server, fake_client):
    await call_tool_json(
        server,
        "create_webhook",
        {"name": "Export hook", "event": "contact_exported", "target_url": "https://hooks.example.com/x"},
    )

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/leads/api/webhooks")
    assert fake_client.last.body == {
        "name": "Export hook",
        "event": "contact_exported",
        "target_url": "https://hooks.example.com/x",
    }


@pytest.mark.asyncio
async def test_list_enrichment_queue(server, fake_client):
    await call_tool_json(server, "list_enrichment_queue", {"limit": 5, "order_type": "asc"})

    assert (fake_client.last.method, fake_client.last.path) == ("GET", "/leads/api/enrichment-queue")
    assert fake_client.last.query == {"limit": "5", "order_type": "asc"}


@pytest.mark.asyncio
async def test_delete_attachment(server, fake_client):
    await call_tool_json(server, "delete_attachment", {"uuid": "A1"})

    assert (fake_client.last.method, fake_client.last.path) == ("DELETE", "/leads/api/attachments/A1")
    assert fake_client.last.body is None


@pytest.mark.asyncio
async def test_send_email_with_cc_and_bcc(server, fake_client):
    args = {
        "sender_profile_uuid": "SP",
        "lead_uuid": "L1",
        "from_name": "Sam",
        "from_email": "sam@seller.io",
        "to_name": "Ann",
        "to_email": "ann@acme.io",
        "subject": "Intro",
        "cc": ["boss@seller.io"],
        "bcc": ["crm@seller.io"],
    }
    await call_tool_json(server, "send_email", args)

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/emails/api/emails/send-email")
    assert fake_client.last.body == args


@pytest.mark.asyncio
async def test_send_email_without_copies(server, fake_client):
    await call_tool_json(
        server,
        "send_email",
        {
            "sender_profile_uuid": "SP",
            "lead_uuid": "L1",
            "from_name": "Sam",
            "from_email": "sam@seller.io",
            "to_name": "Ann",
            "to_email": "ann@acme.io",
            "subject": "Intro",
        },
    )

    assert "cc" not in fake_client.last.body
    assert "bcc" not in fake_client.last.body


@pytest.mark.asyncio
async def test_create_sender_profile(server, fake_client):
    await call_tool_json(
        server,
        "create_sender_profile",
        {"first_name": "Sam", "last_name": "Seller", "assignee_user_id": 7},
    )

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/flows/api/sender-profiles")
    assert fake_client.last.body == {"first_name": "Sam", "last_name": "Seller", "assignee_user_id": 7}


@pytest.mark.asyncio
async def test_create_llm(server, fake_client):
    await call_tool_json(
        server,
        "create_llm",
        {"name": "Main", "provider": "anthropic", "provider_api_token": "tok-123"},
    )

    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/ai/api/llms")
    assert fake_client.last.body == {"name": "Main", "provider": "anthropic", "provider_api_token": "tok-123"}


@pytest.mark.asyncio
async def test_create_llm_rejects_unknown_provider(server, fake_client):
    with pytest.raises(ToolError):
        await call_tool_json(server, "create_llm", {"name": "x", "provider": "acme", "provider_api_token": "t"})

    assert fake_client.calls == []
