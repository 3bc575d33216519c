from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool
from grinfi_mcp.tools.contacts import ids_filter

DEFAULT_TASK_TYPE = "linkedin_send_message"
DEFAULT_TIMEZONE = "UTC"

TASK_PATH = "/flows/api/tasks/{uuid}"

Automation = Literal["manual", "auto"]
TaskStatus = Literal["in_progress", "closed", "canceled", "failed"]


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    async def _task_action(uuid: str, action: str) -> str:
        return json_result(await client.request_async("PUT", api_path(TASK_PATH + "/" + action, uuid=uuid)))

    async def _mass_action(action: str, uuids: list[str]) -> str:
        path = f"/flows/api/tasks/mass-{action}"
        return json_result(await client.request_async("PUT", path, {"uuids": uuids}))

    @grinfi_tool(
        mcp,
        "create_task",
        "Create a new task (e.g. send LinkedIn message) for a contact. The task is scheduled and will be executed "
        "by the automation system. Requires lead_uuid, sender_profile_uuid, message text, and schedule time.",
    )
    async def create_task(
        lead_uuid: Annotated[str, Field(description="UUID of the contact (lead)")],
        sender_profile_uuid: Annotated[str, Field(description="UUID of the sender profile to execute the task")],
        text: Annotated[str, Field(description="Message text or task content")],
        schedule_at: Annotated[
            str,
            Field(description="When to execute the task (ISO 8601 format, e.g. '2026-02-17T10:00:00.000000Z')"),
        ],
        type: Annotated[
            str | None,
            Field(
                description="Task type (default: linkedin_send_message). Known types: linkedin_send_message, "
                "linkedin_send_connection_request, linkedin_send_inmail, linkedin_like_latest_post, "
                "linkedin_endorse_skills"
            ),
        ] = None,
        timezone: Annotated[str | None, Field(description="Timezone (default: UTC)")] = None,
        note: Annotated[str | None, Field(description="Optional note for the task")] = None,
    ) -> str:
        body = {
            "lead_uuid": lead_uuid,
            "sender_profile_uuid": sender_profile_uuid,
            "type": type or DEFAULT_TASK_TYPE,
            "automation": "manual",
            "status": "new",
            "payload": {"template": text, "note": note},
            "schedule_at": schedule_at,
            "timezone": timezone or DEFAULT_TIMEZONE,
            "filter": ids_filter([lead_uuid]),
        }
        return json_result(await client.request_async("POST", "/flows/api/tasks", body))

    @grinfi_tool(mcp, "get_task", "Get a specific task by UUID.")
    async def get_task(uuid: Annotated[str, Field(description="UUID of the task")]) -> str:
        return json_result(await client.request_async("GET", api_path(TASK_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp,
        "list_tasks",
        "List tasks with filters. Use automation='manual' for manual tasks. Statuses: in_progress, closed (done), "
        "canceled, failed. Use schedule_at_before to filter by due date.",
    )
    async def list_tasks(
        limit: Annotated[int | None, Field(description="Number of results (default 20)")] = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
        automation: Annotated[
            Automation | None,
            Field(description="Filter: 'manual' for manual tasks, 'auto' for automation tasks"),
        ] = None,
        status: Annotated[TaskStatus | None, Field(description="Filter by task status")] = None,
        type: Annotated[str | None, Field(description="Filter by task type (e.g. 'linkedin_send_message')")] = None,
        lead_uuid: str | None = None,
        sender_profile_uuid: str | None = None,
        flow_uuid: str | None = None,
        assignee_uuid: str | None = None,
        schedule_at_before: Annotated[
            str | None, Field(description="Filter tasks scheduled before this ISO date")
        ] = None,
        schedule_at_after: Annotated[str | None, Field(description="Filter tasks scheduled after this ISO date")] = None,
    ) -> str:
        query = build_query(
            limit,
            offset,
            order_field,
            order_type,
            search,
            automation=automation,
            status=status,
            type=type,
            lead_uuid=lead_uuid,
            sender_profile_uuid=sender_profile_uuid,
            flow_uuid=flow_uuid,
            assignee_uuid=assignee_uuid,
            schedule_at_before=schedule_at_before,
            schedule_at_after=schedule_at_after,
        )
        return json_result(await client.request_async("GET", "/flows/api/tasks", query=query))

    @grinfi_tool(mcp, "complete_task", "Mark a task as completed.")
    async def complete_task(uuid: Annotated[str, Field(description="UUID of the task to complete")]) -> str:
        return await _task_action(uuid, "complete")

    @grinfi_tool(mcp, "cancel_task", "Cancel a task.")
    async def cancel_task(uuid: Annotated[str, Field(description="UUID of the task to cancel")]) -> str:
        return await _task_action(uuid, "cancel")

    @grinfi_tool(mcp, "fail_task", "Mark a task as failed.")
    async def fail_task(uuid: Annotated[str, Field(description="UUID of the task to fail")]) -> str:
        return await _task_action(uuid, "fail")

    @grinfi_tool(mcp, "mass_cancel_tasks", "Cancel multiple tasks at once.")
    async def mass_cancel_tasks(
        uuids: Annotated[list[str], Field(description="Array of task UUIDs to cancel")],
    ) -> str:
        return await _mass_action("cancel", uuids)

    @grinfi_tool(mcp, "mass_complete_tasks", "Mark multiple tasks as completed at once.")
    async def mass_complete_tasks(
        uuids: Annotated[list[str], Field(description="Array of task UUIDs to complete")],
    ) -> str:
        return await _mass_action("complete", uuids)

    @grinfi_tool(mcp, "mass_retry_tasks", "Retry multiple failed tasks at once.")
    async def mass_retry_tasks(uuids: Annotated[list[str], Field(description="Array of task UUIDs to retry")]) -> str:
        return await _mass_action("retry", uuids)

    @grinfi_tool(mcp, "mass_skip_tasks", "Skip multiple tasks at once.")
    async def mass_skip_tasks(uuids: Annotated[list[str], Field(description="Array of task UUIDs to skip")]) -> str:
        return await _mass_action("skip", uuids)

    @grinfi_tool(
        mcp,
        "get_tasks_group_counts",
        "Get task counts grouped by status. Use automation='manual' for manual tasks.",
    )
    async def get_tasks_group_counts(
        automation: Automation | None = None,
        schedule_at_before: str | None = None,
        schedule_at_after: str | None = None,
    ) -> str:
        query = build_query(
            automation=automation,
            schedule_at_before=schedule_at_before or None,
            schedule_at_after=schedule_at_after or None,
        )
        return json_result(await client.request_async("GET", "/flows/api/tasks/group-counts", query=query))

    @grinfi_tool(mcp, "get_tasks_schedule", "Get the tasks schedule overview.")
    async def get_tasks_schedule() -> str:
        return json_result(await client.request_async("GET", "/flows/api/tasks/schedule"))
