"""
Derived link fields for contact-shaped results.

Contacts coming back from the leads endpoints get two convenience URLs so a
model can hand the user a clickable link without knowing the URL schemes:

- `_grinfi_contact_url`: the contact page in the Grinfi CRM UI
- `_linkedin_url`: the public LinkedIn profile

Enrichment only adds keys; nothing that upstream returned is changed.
"""

from __future__ import annotations

from typing import Any

CONTACT_URL = "https://leadgen.grinfi.io/crm/contacts/{uuid}"
LINKEDIN_URL = "https://www.linkedin.com/in/{linkedin}"


def enrich_contact(contact: dict[str, Any]) -> dict[str, Any]:
    uuid = contact.get("uuid")
    if uuid:
        contact["_grinfi_contact_url"] = CONTACT_URL.format(uuid=uuid)
    linkedin = contact.get("linkedin")
    if linkedin:
        contact["_linkedin_url"] = LINKEDIN_URL.format(linkedin=linkedin)
    return contact


def enrich_result(value: Any) -> Any:
    """
    Enrich the contacts found in a response, whatever its shape:

    - `{"lead": {...}}`               single lookup / upsert
    - `{"data": [{...}, ...]}`        search pages, items either contacts or `{"lead": {...}}`
    - `{"uuid": ..., "name": ...}`    a bare contact
    """
    if not isinstance(value, dict):
        return value

    lead = value.get("lead")
    if isinstance(lead, dict):
        enrich_contact(lead)

    items = value.get("data")
    if isinstance(items, list):
        for item in items:
            if not isinstance(item, dict):
                continue
            nested = item.get("lead")
            if isinstance(nested, dict):
                enrich_contact(nested)
            elif item.get("uuid") and not nested:
                enrich_contact(item)

    if value.get("uuid") and value.get("name"):
        enrich_contact(value)

    return value
