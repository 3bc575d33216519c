from __future__ import annotations

import pytest

from tests.helpers.mcp_runtime import call_tool_json


@pytest.mark.asyncio
async def test_create_task_defaults(server, fake_client):
    await call_tool_json(
        server,
        "create_task",
        {"lead_uuid": "L1", "sender_profile_uuid": "SP", "text": "Hi!", "schedule_at": "2026-02-17T10:00:00Z"},
    )

    assert fake_client.last.method == "POST"
    assert fake_client.last.path == "/flows/api/tasks"
    assert fake_client.last.body == {
        "lead_uuid": "L1",
        "sender_profile_uuid": "SP",
        "type": "linkedin_send_message",
        "automation": "manual",
        "status": "new",
        "payload": {"template": "Hi!", "note": None},
        "schedule_at": "2026-02-17T10:00:00Z",
        "timezone": "UTC",
        "filter": {"all": False, "ids": ["L1"], "excludeIds": []},
    }


@pytest.mark.asyncio
async def test_list_tasks_filters(server, fake_client):
    await call_tool_json(
        server,
        "list_tasks",
        {"automation": "manual", "status": "failed", "limit": 5, "schedule_at_before": "2026-01-01"},
    )

    assert fake_client.last.path == "/flows/api/tasks"
    assert fake_client.last.query == {
        "limit": "5",
        "filter[automation]": "manual",
        "filter[status]": "failed",
        "filter[schedule_at_before]": "2026-01-01",
    }


@pytest.mark.asyncio
async def test_task_actions(server, fake_client):
    await call_tool_json(server, "complete_task", {"uuid": "T1"})
    assert (fake_client.last.method, fake_client.last.path) == ("PUT", "/flows/api/tasks/T1/complete")

    await call_tool_json(server, "mass_retry_tasks", {"uuids": ["T1", "T2"]})
    assert fake_client.last.path == "/flows/api/tasks/mass-retry"
    assert fake_client.last.body == {"uuids": ["T1", "T2"]}


@pytest.mark.asyncio
async def test_automation_actions(server, fake_client):
    await call_tool_json(server, "start_automation", {"flow_uuid": "F1"})
    assert (fake_client.last.method, fake_client.last.path) == ("PUT", "/flows/api/flows/F1/start")

    await call_tool_json(server, "add_contact_to_automation", {"flow_uuid": "F1", "lead_uuid": "L1"})
    assert (fake_client.last.method, fake_client.last.path) == ("POST", "/flows/api/flows/F1/leads/L1")


@pytest.mark.asyncio
async def test_list_pipeline_stages_query(server, fake_client):
    await call_tool_json(server, "list_pipeline_stages", {"object": "company"})

    assert fake_client.last.path == "/leads/api/pipeline-stages"
    assert fake_client.last.query == {"filter[object]": "company"}


@pytest.mark.asyncio
async def test_custom_field_value_null_clears(server, fake_client):
    await call_tool_json(
        server,
        "upsert_custom_field_value",
        {"custom_field_uuid": "CF", "object_type": "lead", "object_uuid": "L1", "value": None},
    )

    assert fake_client.last.method == "PUT"
    assert fake_client.last.path == "/leads/api/custom-fields/CF/values"
    assert fake_client.last.body == {"object_type": "lead", "object_uuid": "L1", "value": None}


@pytest.mark.asyncio
async def test_list_activities_free_text_filter(server, fake_client):
    await call_tool_json(server, "list_activities", {"object": "lead", "filter": "opened", "limit": 3})

    assert fake_client.last.path == "/leads/api/activities"
    assert fake_client.last.query == {"limit": "3", "filter[q]": "opened", "filter[object]": "lead"}


@pytest.mark.asyncio
async def test_delete_mailbox_sends_body(server, fake_client):
    await call_tool_json(
        server,
        "delete_mailbox",
        {"uuid": "MB", "automation_reassign_mailboxes": True, "automation_mailbox_to_reassign": "MB2"},
    )

    assert fake_client.last.method == "DELETE"
    assert fake_client.last.body == {"automation_reassign_mailboxes": True, "automation_mailbox_to_reassign": "MB2"}


@pytest.mark.asyncio
async def test_mark_conversation_as_read(server, fake_client):
    await call_tool_json(server, "mark_conversation_as_read", {"lead_uuid": "L1"})

    assert fake_client.last.path == "/leads/api/leads/mass-action"
    assert fake_client.last.body == {
        "type": "contact_mark_read",
        "filter": {"all": False, "ids": ["L1"], "excludeIds": []},
    }


@pytest.mark.asyncio
async def test_get_unread_conversations_tool(server, fake_client):
    fake_client.routes[("GET", "/flows/api/linkedin-messages")] = {"data": []}

    out = await call_tool_json(server, "get_unread_conversations", {"sender_profile_uuid": ""})

    assert out["note"] == "No inbox messages found"
    assert fake_client.last.query["filter[sender_profile_uuid]"] is None
