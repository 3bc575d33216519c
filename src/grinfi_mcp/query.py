from __future__ import annotations

import json
from typing import Any

from grinfi_mcp.enrich import enrich_result


def _qs(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_query(
    limit: int | None = None,
    offset: int | None = None,
    order_field: str | None = None,
    order_type: str | None = None,
    search: str | None = None,
    **filters: Any,
) -> dict[str, str]:
    """
    Assemble the query map shared by the list endpoints.

    `search` is sent as `filter[q]`; every extra keyword becomes `filter[<name>]`.
    Unset values are left out so the upstream defaults apply.
    """
    query: dict[str, str] = {}
    if limit is not None:
        query["limit"] = _qs(limit)
    if offset is not None:
        query["offset"] = _qs(offset)
    if order_field:
        query["order_field"] = _qs(order_field)
    if order_type:
        query["order_type"] = _qs(order_type)
    if search:
        query["filter[q]"] = _qs(search)
    for name, value in filters.items():
        if value is not None:
            query[f"filter[{name}]"] = _qs(value)
    return query


def compact(**fields: Any) -> dict[str, Any]:
    """Request body made of the fields that were actually given."""
    return {k: v for k, v in fields.items() if v is not None}


def json_result(value: Any, enrich: bool = False) -> str:
    """Render a tool result as one pretty-printed JSON text payload."""
    if enrich:
        value = enrich_result(value)
    return json.dumps(value, indent=2, ensure_ascii=False)
