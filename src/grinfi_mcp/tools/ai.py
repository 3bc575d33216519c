from typing import Annotated, Any, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grinfi_mcp.client import GrinfiClient, api_path
from grinfi_mcp.query import build_query, compact, json_result
from grinfi_mcp.tools import Limit, Offset, OrderField, OrderType, Search, grinfi_tool

LlmProvider = Literal["openai", "google", "anthropic", "perplexity", "deepseek", "xai", "meta"]
JobType = Literal["ai_variable", "ai_template", "ai_agent"]

LLM_PATH = "/ai/api/llms/{uuid}"


def register(mcp: FastMCP, client: GrinfiClient) -> None:
    # Agents

    @grinfi_tool(mcp, "list_ai_agents", "List AI agents with pagination and sorting.")
    async def list_ai_agents(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/ai/api/agents", query=query))

    @grinfi_tool(mcp, "get_ai_agent", "Get an AI agent by UUID.")
    async def get_ai_agent(uuid: Annotated[str, Field(description="UUID of the AI agent")]) -> str:
        return json_result(await client.request_async("GET", api_path("/ai/api/agents/{uuid}", uuid=uuid)))

    # Templates and variables

    @grinfi_tool(mcp, "list_ai_templates", "List AI templates with pagination and sorting.")
    async def list_ai_templates(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/ai/api/templates", query=query))

    @grinfi_tool(mcp, "get_ai_template", "Get an AI template by UUID.")
    async def get_ai_template(uuid: Annotated[str, Field(description="UUID of the AI template")]) -> str:
        return json_result(await client.request_async("GET", api_path("/ai/api/templates/{uuid}", uuid=uuid)))

    @grinfi_tool(mcp, "create_ai_template", "Create a new AI template for generating messages.")
    async def create_ai_template(
        name: Annotated[str, Field(description="Template name")],
        type: str | None = None,
        prompt: str | None = None,
        body: str | None = None,
        subject: str | None = None,
        fallback_body: str | None = None,
        enable_validation: bool | None = None,
        template_category_uuid: str | None = None,
    ) -> str:
        payload = compact(
            name=name,
            type=type,
            prompt=prompt,
            body=body,
            subject=subject,
            fallback_body=fallback_body,
            enable_validation=enable_validation,
            template_category_uuid=template_category_uuid,
        )
        return json_result(await client.request_async("POST", "/ai/api/templates", payload))

    @grinfi_tool(mcp, "render_ai_template", "Render an AI template with variables to generate a message.")
    async def render_ai_template(
        template_uuid: Annotated[str, Field(description="UUID of the AI template to render")],
        variables: Annotated[dict[str, Any] | None, Field(description="Variables to pass to the template")] = None,
    ) -> str:
        path = api_path("/ai/api/templates/{uuid}/render", uuid=template_uuid)
        return json_result(await client.request_async("POST", path, compact(variables=variables or None)))

    @grinfi_tool(mcp, "list_ai_variables", "List AI variables with pagination and sorting.")
    async def list_ai_variables(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
        search: Search = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type, search)
        return json_result(await client.request_async("GET", "/ai/api/variables", query=query))

    @grinfi_tool(
        mcp,
        "ai_ask",
        "Ask the Grinfi AI a question. Can be used for generating content, analyzing data, etc.",
    )
    async def ai_ask(
        question: Annotated[str, Field(description="The question or prompt for the AI")],
        context: Annotated[dict[str, Any] | None, Field(description="Additional context for the AI")] = None,
    ) -> str:
        body = {"question": question, **compact(context=context or None)}
        return json_result(await client.request_async("POST", "/ai/api/ask", body))

    # LLM integrations

    @grinfi_tool(
        mcp,
        "list_llms",
        "List all LLM integrations (OpenAI, Anthropic, Google, etc.) configured in your account.",
    )
    async def list_llms() -> str:
        return json_result(await client.request_async("GET", "/ai/api/llms"))

    @grinfi_tool(mcp, "get_llm", "Get an LLM integration by UUID.")
    async def get_llm(uuid: Annotated[str, Field(description="UUID of the LLM integration")]) -> str:
        return json_result(await client.request_async("GET", api_path(LLM_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp,
        "create_llm",
        "Create a new LLM integration. Supported providers: openai, google, anthropic, perplexity, deepseek, xai, "
        "meta.",
    )
    async def create_llm(
        name: Annotated[str, Field(description="Human-readable name")],
        provider: Annotated[LlmProvider, Field(description="LLM provider")],
        provider_api_token: Annotated[str, Field(description="API token for the provider")],
        owner: Annotated[
            Literal["gs", "customer"] | None,
            Field(description="Who owns this integration (default: customer)"),
        ] = None,
    ) -> str:
        body = compact(name=name, provider=provider, provider_api_token=provider_api_token, owner=owner)
        return json_result(await client.request_async("POST", "/ai/api/llms", body))

    @grinfi_tool(mcp, "update_llm", "Update an LLM integration by UUID. Can update name and/or API token.")
    async def update_llm(
        uuid: Annotated[str, Field(description="UUID of the LLM to update")],
        name: str | None = None,
        provider_api_token: str | None = None,
    ) -> str:
        body = compact(name=name, provider_api_token=provider_api_token)
        return json_result(await client.request_async("PUT", api_path(LLM_PATH, uuid=uuid), body))

    @grinfi_tool(mcp, "delete_llm", "Delete an LLM integration by UUID.")
    async def delete_llm(uuid: Annotated[str, Field(description="UUID of the LLM to delete")]) -> str:
        return json_result(await client.request_async("DELETE", api_path(LLM_PATH, uuid=uuid)))

    @grinfi_tool(
        mcp,
        "generate_llm_response",
        "Generate a response using a specific LLM integration. Pass messages and config.",
    )
    async def generate_llm_response(
        uuid: Annotated[str, Field(description="UUID of the LLM integration to use")],
        job_type: Annotated[JobType, Field(description="Purpose of the generation")],
        messages: Annotated[list[dict[str, Any]], Field(description="Chat history / messages array")],
        config: Annotated[
            dict[str, Any] | None,
            Field(description="Provider-specific config (model, temperature, max_tokens, etc.)"),
        ] = None,
    ) -> str:
        body = {"job_type": job_type, "messages": messages, **compact(config=config or None)}
        path = api_path(LLM_PATH + "/generate", uuid=uuid)
        return json_result(await client.request_async("POST", path, body))

    @grinfi_tool(
        mcp,
        "get_llm_metrics",
        "Get usage metrics for specified LLM integrations (e.g. credits used this month).",
    )
    async def get_llm_metrics(uuids: Annotated[list[str], Field(description="Array of LLM UUIDs")]) -> str:
        return json_result(await client.request_async("POST", "/ai/api/llms/metrics", {"uuids": uuids}))

    # Logs

    @grinfi_tool(mcp, "list_llm_logs", "List LLM generation logs with pagination and sorting.")
    async def list_llm_logs(
        limit: Limit = None,
        offset: Offset = None,
        order_field: OrderField = None,
        order_type: OrderType = None,
    ) -> str:
        query = build_query(limit, offset, order_field, order_type)
        return json_result(await client.request_async("GET", "/ai/api/llm-logs", query=query))

    @grinfi_tool(mcp, "get_llm_log", "Get a specific LLM log entry by UUID.")
    async def get_llm_log(uuid: Annotated[str, Field(description="UUID of the LLM log entry")]) -> str:
        return json_result(await client.request_async("GET", api_path("/ai/api/llm-logs/{uuid}", uuid=uuid)))
