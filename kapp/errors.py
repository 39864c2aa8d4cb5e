#!/usr/bin/env python3
"""
Exceptions raised by the kintone app-schema client.
"""

import re
from typing import Any, Dict, List, Optional

from kapp.constants import REVISION_CONFLICT_CODE, REVISION_CONFLICT_STATUS

# Error keys such as "apps[1].revision" point at one entry of a batch request
_BATCH_KEY_PATTERN = re.compile(r"^apps\[(\d+)\]")


class KintoneAPIError(Exception):
    """
    Error response returned by the kintone REST API.

    Carries the HTTP status and the fields of the platform's error body
    (`id`, `code`, `message`, `errors`).
    """

    def __init__(
        self,
        status: int,
        message: str,
        code: Optional[str] = None,
        error_id: Optional[str] = None,
        errors: Optional[Dict[str, Any]] = None,
    ):
        self.status = status
        self.message = message
        self.code = code
        self.error_id = error_id
        self.errors = errors or {}
        super().__init__(f"[{status}] [{code}] {message} ({error_id})")

    @classmethod
    def from_response_body(cls, status: int, body: Any) -> "KintoneAPIError":
        if not isinstance(body, dict):
            return cls(status, str(body) if body else "Unexpected response")
        return cls(
            status,
            body.get("message", ""),
            code=body.get("code"),
            error_id=body.get("id"),
            errors=body.get("errors"),
        )

    @property
    def is_revision_conflict(self) -> bool:
        if self.code:
            return self.code == REVISION_CONFLICT_CODE
        return self.status == REVISION_CONFLICT_STATUS


class RevisionConflictError(KintoneAPIError):
    """
    The revision supplied with a write is not the current one.

    Callers should re-read the facet and retry with the new revision.
    For deploy batches, `apps` lists the app ids whose revision was stale.
    """

    def __init__(self, *args, apps: Optional[List[str]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.apps = apps or []

    @classmethod
    def from_api_error(
        cls, error: KintoneAPIError, batch: Optional[List[Dict[str, Any]]] = None
    ) -> "RevisionConflictError":
        """
        Build a conflict error from a generic API error.

        Args:
            error: Error raised by the transport
            batch: The `apps` entries of a deploy request, used to map
                   indexed error keys back to app ids

        Returns:
            RevisionConflictError with the same status and error fields
        """
        apps = []
        if batch:
            for key in error.errors:
                match = _BATCH_KEY_PATTERN.match(key)
                if not match:
                    continue
                index = int(match.group(1))
                if index < len(batch):
                    app_id = str(batch[index]["app"])
                    if app_id not in apps:
                        apps.append(app_id)

        return cls(
            error.status,
            error.message,
            code=error.code,
            error_id=error.error_id,
            errors=error.errors,
            apps=apps,
        )
