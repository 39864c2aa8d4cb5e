#!/usr/bin/env python3
"""
kintone app client

Single entry point exposing the schema editor and the deploy orchestrator
over one transport.
"""

from kapp.deploy_orchestrator import DeployOrchestrator
from kapp.http_client import KintoneHTTPClient
from kapp.schema_editor import SchemaEditor


class AppClient(SchemaEditor, DeployOrchestrator):
    """
    Reads and edits app schemas, deploys them and creates apps.

    Example:
        client = AppClient.from_env()
        fields = client.get_form_fields(app=1, preview=True)
        client.update_form_fields(app=1, properties={...}, revision=fields.revision)
        client.deploy_app([{"app": 1}])
    """

    @classmethod
    def from_env(cls, **kwargs) -> "AppClient":
        """Create a client whose transport is configured from the environment."""
        return cls(KintoneHTTPClient(**kwargs))
