from typing import Annotated, Any, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, ObjectType, Offset, OrderField, OrderType, grinfi_tool

StageCategory = Literal["cold", "engaging", "positive", "negative"]
StageType = Literal["custom", "new", "approaching", "engaging", "replied"]

STAGE_PATH = "/leads/api/pipeline-stages/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    # Pipeline stages

    @grinfi_tool(
        mcp,
        "list_pipeline_stages",
        "List pipeline stages. Filter by object type (lead or company). Returns UUID, name, category, and order "
        "for each stage.",
    )
    async def list_pipeline_stages(
        object: Annotated[ObjectType | None, Field(description="Filter by object type (default: lead)")] = None,
        type: Annotated[StageType | None, Field(description="Filter by stage type")] = None,
    ) -> str:
        query = build_query(object=object, type=type)
        return json_result(await client.request_async("GET", "/leads/api/pipeline-stages", query=query))

    @grinfi_tool(mcp, "create_pipeline_stage", "Create a new custom pipeline stage.")
    async def create_pipeline_stage(
        name: Annotated[str, Field(description="Stage name")],
        object: Annotated[ObjectType, Field(description="Object type")],
        category: Annotated[StageCategory, Field(description="Stage category")],
        order: Annotated[int | None, Field(description="Display order")] = None,
    ) -> str:
        body = compact(name=name, object=object, category=category, order=order)
        return json_result(await client.request_async("POST", "/leads/api/pipeline-stages", body))

    @grinfi_tool(mcp, "update_pipeline_stage", "Update a pipeline stage's name, category, or order.")
    async def update_pipeline_stage(
        uuid: Annotated[str, Field(description="UUID of the pipeline stage")],
        name: str | None = None,
        category: StageCategory | None = None,
        order: int | None = None,
    ) -> str:
        body = compact(name=name, category=category, order=order)
        return json_result(await client.request_async("PUT", api_path(STAGE_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "delete_pipeline_stage", "Delete a custom pipeline stage by UUID.")
    async def delete_pipeline_stage(uuid: Annotated[str, Field(description="UUID of the pipeline stage")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(STAGE_PATH, uuid=uuid)))

    # Custom fields

    @grinfi_tool(mcp, "list_custom_fields", "List all custom fields. Custom fields can be for leads or companies.")
    async def list_custom_fields(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type)
        return json_result(await client.request_async("GET", "/leads/api/custom-fields", query=query))

    @grinfi_tool(mcp, "create_custom_field", "Create a new custom field for leads or companies.")
    async def create_custom_field(
        name: Annotated[str, Field(description="Field name")],
        object: Annotated[ObjectType, Field(description="Object type")],
        order: Annotated[int | None, Field(description="Display order")] = None,
    ) -> str:
        body = compact(name=name, object=object, order=order)
        return json_result(await client.request_async("POST", "/leads/api/custom-fields", body))

    @grinfi_tool(mcp, "upsert_custom_field_value", "Set (upsert) a custom field value on a lead or company.")
    async def upsert_custom_field_value(
        custom_field_uuid: Annotated[str, Field(description="UUID of the custom field")],
        object_type: Annotated[ObjectType, Field(description="Object type")],
        object_uuid: Annotated[str, Field(description="UUID of the lead or company")],
        value: Annotated[Any, Field(description="Field value (or null to clear)")] = None,
    ) -> str:
        # value is always sent; null clears the field.
        body = {"object_type": object_type, "object_uuid": object_uuid, "value": value}
        path = api_path("/leads/api/custom-fields/{uuid}/values", uuid=custom_field_uuid)
        return json_result(await client.request_async("PUT", path, body))
