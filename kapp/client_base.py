#!/usr/bin/env python3
"""
Shared request plumbing for the schema editor and the deploy orchestrator.
"""

from typing import Any, Dict, List, Optional, Union

from loguru import logger

from kapp.errors import KintoneAPIError, RevisionConflictError
from kapp.http_client import Transport
from kapp.paths import Tier, build_path


def compact(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop parameters that were not supplied (None)."""
    return {key: value for key, value in params.items() if value is not None}


class ClientBase:
    """Holds the transport and turns stale-revision errors into RevisionConflictError."""

    def __init__(self, transport: Transport, guest_space_id: Optional[Union[str, int]] = None):
        self.client = transport
        if guest_space_id is None:
            guest_space_id = getattr(transport, "guest_space_id", None)
        self.guest_space_id = guest_space_id

    def _path(self, endpoint: str, tier: Tier = Tier.LIVE) -> str:
        return build_path(endpoint, tier, self.guest_space_id)

    def _call(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        batch: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Issue exactly one request through the transport.

        Args:
            method: "get", "post", "put" or "delete"
            path: Request path
            params: Query parameters or body
            batch: Deploy entries, used to attribute conflicts to apps

        Returns:
            Decoded JSON response

        Raises:
            RevisionConflictError: If the server rejected a stale revision on a write
            KintoneAPIError: For any other error response, and for every read error (unchanged)
        """
        try:
            return getattr(self.client, method)(path, params)
        except KintoneAPIError as e:
            # Reads carry no revision
            if method == "get" or not e.is_revision_conflict:
                raise
            conflict = RevisionConflictError.from_api_error(e, batch)
            logger.warning(f"Revision conflict on {method.upper()} {path}: {e.message}")
            raise conflict from e
