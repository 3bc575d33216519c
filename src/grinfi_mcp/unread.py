from __future__ import annotations

import asyncio
import logging
from typing import Any

from grinfi_mcp.client import GrinfiClient, api_path

logger = logging.getLogger(__name__)

DEFAULT_SCAN_LIMIT = 300
MAX_SCAN_LIMIT = 1000

MESSAGES_PATH = "/flows/api/linkedin-messages"
LEAD_PATH = "/leads/api/leads/{uuid}"


def _scan_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_SCAN_LIMIT
    return min(limit, MAX_SCAN_LIMIT)


def latest_message_per_contact(messages: list[dict]) -> dict[str, dict]:
    """Newest message per lead_uuid; the input is already ordered newest first."""
    latest: dict[str, dict] = {}
    for msg in messages:
        if not isinstance(msg, dict):
            continue
        lead_uuid = msg.get("lead_uuid")
        if lead_uuid and lead_uuid not in latest:
            latest[lead_uuid] = msg
    return latest


def _has_unread(unread_counts: Any) -> bool:
    if not isinstance(unread_counts, list):
        return False
    for entry in unread_counts:
        if not isinstance(entry, dict):
            continue
        try:
            if float(entry.get("count") or 0) > 0:
                return True
        except (TypeError, ValueError):
            continue
    return False


async def _unread_entry(client: GrinfiClient, lead_uuid: str, msg: dict) -> dict | None:
    try:
        detail = await client.request_async("GET", api_path(LEAD_PATH, uuid=lead_uuid))
    except Exception as e:  # a failed lookup drops this contact only
        logger.debug("unread: skipping contact %s: %s", lead_uuid, e)
        return None

    lead = detail.get("lead") if isinstance(detail, dict) else None
    if not isinstance(lead, dict):
        return None

    unread_counts = lead.get("unread_counts") or []
    if not _has_unread(unread_counts):
        return None

    return {
        "contact_name": lead.get("name") or "Unknown",
        "contact_uuid": lead_uuid,
        "unread_counts": unread_counts,
        "latest_message": msg.get("text"),
        "latest_message_at": msg.get("created_at"),
        "sender_profile_uuid": msg.get("sender_profile_uuid"),
        "conversation_uuid": msg.get("linkedin_conversation_uuid"),
    }


async def get_unread_conversations(
    client: GrinfiClient,
    limit: int | None = None,
    sender_profile_uuid: str | None = None,
    *,
    concurrency: int = 1,
) -> dict:
    """
    Contacts with unread messages among the most recent inbox messages.

    One listing call, then one detail lookup per distinct contact. A failed
    lookup drops that contact only; the listing call failing fails the whole
    operation.
    """
    query = {
        "limit": _scan_limit(limit),
        "filter[type]": "inbox",
        "order_field": "created_at",
        "order_type": "desc",
        "filter[sender_profile_uuid]": sender_profile_uuid,
    }
    listing = await client.request_async("GET", MESSAGES_PATH, query=query)

    messages = listing.get("data") if isinstance(listing, dict) else None
    if not messages:
        return {"unread_conversations": [], "total_unread": 0, "note": "No inbox messages found"}

    latest = latest_message_per_contact(messages)

    if concurrency <= 1:
        entries = [await _unread_entry(client, uuid, msg) for uuid, msg in latest.items()]
    else:
        sem = asyncio.Semaphore(concurrency)

        async def _bounded(uuid: str, msg: dict) -> dict | None:
            async with sem:
                return await _unread_entry(client, uuid, msg)

        entries = await asyncio.gather(*(_bounded(uuid, msg) for uuid, msg in latest.items()))

    unread = [e for e in entries if e is not None]

    out: dict[str, Any] = {
        "unread_conversations": unread,
        "total_unread": len(unread),
        "scanned_messages": len(messages),
    }
    if listing.get("total") is not None:
        out["total_inbox_messages"] = listing["total"]
    out["note"] = "Showing contacts with unread_counts > 0 from recent inbox messages"
    return out
