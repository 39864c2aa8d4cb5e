#!/usr/bin/env python3
"""
Request path construction for the kintone REST API.

Every facet operation resolves its configuration tier (preview or live) once
and hands it to `build_path`, which is the only place where the `/preview`
segment is added.
"""

from enum import Enum
from typing import Optional, Union

from kapp.constants import API_ROOT, API_VERSION, ENDPOINTS, PREVIEW_SEGMENT


class Tier(str, Enum):
    """Configuration tier targeted by a request."""

    PREVIEW = "preview"
    LIVE = "live"

    @classmethod
    def from_flag(cls, preview: Optional[bool]) -> "Tier":
        return cls.PREVIEW if preview else cls.LIVE


def build_path(
    endpoint: str,
    tier: Tier = Tier.LIVE,
    guest_space_id: Optional[Union[str, int]] = None,
) -> str:
    """
    Build the request path for an endpoint.

    Args:
        endpoint: Endpoint key from ENDPOINTS (e.g. "form_fields") or a raw
                  endpoint name (e.g. "app/form/fields")
        tier: Tier.PREVIEW for the draft configuration, Tier.LIVE otherwise
        guest_space_id: Guest space the app belongs to, if any

    Returns:
        Path such as "/k/v1/preview/app/form/fields.json"
    """
    name = ENDPOINTS.get(endpoint, endpoint)

    segments = [API_ROOT]
    if guest_space_id is not None and str(guest_space_id) != "":
        segments.append(f"/guest/{guest_space_id}")
    segments.append(f"/{API_VERSION}")
    if tier is Tier.PREVIEW:
        segments.append(f"/{PREVIEW_SEGMENT}")
    segments.append(f"/{name}.json")

    return "".join(segments)
