#!/usr/bin/env python3
"""
Deploy orchestrator for kintone apps

This module promotes preview configurations to live, reports deploy status
and creates apps. Deploys are asynchronous: `deploy_app` only enqueues the
work and callers poll `get_deploy_status` until every app reaches a terminal
state.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from kapp.client_base import ClientBase, compact
from kapp.paths import Tier
from kapp.schemas import AddAppResponse, AppDeployStatus, DeployStatusResponse, DeployTarget, to_payload

AppID = Union[str, int]


class DeployOrchestrator(ClientBase):
    """Deploys, deploy status and app creation."""

    def deploy_app(
        self,
        apps: Sequence[Union[DeployTarget, Dict[str, Any]]],
        revert: bool = False,
    ) -> None:
        """
        Enqueue a deploy (or a revert) of the preview configuration.

        Each entry may carry the preview revision the caller last saw. A stale
        revision raises RevisionConflictError naming the offending apps; the
        status of every other app in the batch must be checked separately.

        Args:
            apps: DeployTarget models or {"app": ..., "revision": ...} dicts
            revert: Discard the preview changes instead of deploying them

        Raises:
            RevisionConflictError: If a supplied revision is not the latest
        """
        entries = [compact(entry) for entry in to_payload(list(apps))]
        path = self._path("deploy", Tier.PREVIEW)

        action = "revert" if revert else "deploy"
        logger.info(f"Requesting {action} of app(s) {[entry['app'] for entry in entries]}")

        self._call("post", path, {"apps": entries, "revert": revert}, batch=entries)

    def get_deploy_status(self, apps: Sequence[AppID]) -> List[AppDeployStatus]:
        """
        Get the current deploy state of each app.

        Args:
            apps: App ids

        Returns:
            One AppDeployStatus per app
        """
        path = self._path("deploy", Tier.PREVIEW)
        response = self._call("get", path, {"apps": list(apps)})
        return DeployStatusResponse.model_validate(response).apps

    def add_app(self, name: str, space: Optional[AppID] = None) -> AddAppResponse:
        """
        Create an app in preview.

        With a space, the space's default thread is looked up first and the
        app is created in that thread. If the lookup fails, its error is
        raised and no app is created.

        Args:
            name: App name
            space: Space id to create the app in

        Returns:
            AddAppResponse with the new app id and its preview revision
        """
        path = self._path("app", Tier.PREVIEW)

        if space:
            space_info = self._call("get", self._path("space"), {"id": space})
            thread = space_info["defaultThread"]
            logger.debug(f"Space {space} default thread: {thread}")
            response = self._call("post", path, {"name": name, "space": space, "thread": thread})
        else:
            response = self._call("post", path, {"name": name})

        created = AddAppResponse.model_validate(response)
        logger.info(f"Created app {created.app} '{name}' (revision {created.revision})")
        return created
