"""
Shared fixtures: an in-memory kintone server implementing the Transport protocol.
"""

import copy
import json
from pathlib import Path

import pytest

from kapp.app_client import AppClient
from kapp.errors import KintoneAPIError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name):
    """Load a JSON response fixture"""
    with open(FIXTURES_DIR / name, "r") as f:
        return json.load(f)


class FakeKintoneServer:
    """
    Minimal stand-in for the platform.

    Each app has a live and a preview configuration and one preview revision
    that every preview write advances. Deploys stay PROCESSING until
    `process_deploys()` is called.
    """

    def __init__(self):
        self.calls = []
        self.apps = {}
        self.spaces = {"10": {"id": "10", "defaultThread": "20"}}
        self.deploy_status = {}
        self.next_app_id = 100
        self.next_view_id = 5000

    def add_app(self, app_id, properties=None, revision=3):
        app_id = str(app_id)
        config = {
            "fields": copy.deepcopy(properties or {}),
            "layout": [],
            "views": {},
            "field_acl": [],
        }
        self.apps[app_id] = {
            "live": config,
            "preview": copy.deepcopy(config),
            "revision": revision,
            "name": f"App {app_id}",
        }
        return self.apps[app_id]

    # Transport protocol

    def get(self, path, params=None):
        return self._handle("GET", path, params or {})

    def post(self, path, params=None):
        return self._handle("POST", path, params or {})

    def put(self, path, params=None):
        return self._handle("PUT", path, params or {})

    def delete(self, path, params=None):
        return self._handle("DELETE", path, params or {})

    # Deploy processing

    def process_deploys(self, outcome="SUCCESS"):
        for app_id, status in self.deploy_status.items():
            if status == "PROCESSING":
                self.deploy_status[app_id] = outcome

    # Routing

    def _handle(self, method, path, params):
        self.calls.append((method, path, copy.deepcopy(params)))

        assert path.startswith("/k/v1/") and path.endswith(".json"), path
        endpoint = path[len("/k/v1/"):-len(".json")]
        preview = endpoint.startswith("preview/")
        if preview:
            endpoint = endpoint[len("preview/"):]

        handler = getattr(self, f"_{method.lower()}_{endpoint.replace('/', '_')}", None)
        if handler is None:
            raise KintoneAPIError(404, f"No route for {method} {path}", code="CB_NO01")
        return handler(params, preview)

    def _app(self, params, key="app"):
        app_id = str(params[key])
        if app_id not in self.apps:
            raise KintoneAPIError(404, "The app does not exist.", code="GAIA_AP01")
        return self.apps[app_id]

    def _tier(self, params, preview):
        return self._app(params)["preview" if preview else "live"]

    def _write(self, params, preview):
        assert preview, "schema writes must target the preview configuration"
        app = self._app(params)
        revision = params.get("revision")
        if revision is not None and str(revision) != str(app["revision"]):
            raise KintoneAPIError(
                409,
                "The revision is not the latest. Someone may update an app settings.",
                code="GAIA_CO02",
                error_id="conflict-1",
            )
        app["revision"] += 1
        return app

    # Form fields

    def _get_app_form_fields(self, params, preview):
        app = self._app(params)
        return {"properties": self._tier(params, preview)["fields"], "revision": str(app["revision"])}

    def _post_app_form_fields(self, params, preview):
        app = self._write(params, preview)
        app["preview"]["fields"].update(params["properties"])
        return {"revision": str(app["revision"])}

    def _put_app_form_fields(self, params, preview):
        app = self._write(params, preview)
        for code, definition in params["properties"].items():
            app["preview"]["fields"].setdefault(code, {}).update(definition)
        return {"revision": str(app["revision"])}

    def _delete_app_form_fields(self, params, preview):
        app = self._write(params, preview)
        for code in params["fields"]:
            app["preview"]["fields"].pop(code, None)
        return {"revision": str(app["revision"])}

    # Layout

    def _get_app_form_layout(self, params, preview):
        app = self._app(params)
        return {"layout": self._tier(params, preview)["layout"], "revision": str(app["revision"])}

    def _put_app_form_layout(self, params, preview):
        app = self._write(params, preview)
        app["preview"]["layout"] = params["layout"]
        return {"revision": str(app["revision"])}

    # Views

    def _get_app_views(self, params, preview):
        app = self._app(params)
        return {"views": self._tier(params, preview)["views"], "revision": str(app["revision"])}

    def _put_app_views(self, params, preview):
        app = self._write(params, preview)
        current = app["preview"]["views"]
        by_id = {view["id"]: name for name, view in current.items()}

        updated = {}
        for name, view in params["views"].items():
            if view.get("id") in by_id:
                existing = current[by_id[view["id"]]]
            elif name in current:
                existing = current[name]
            else:
                self.next_view_id += 1
                existing = {"id": str(self.next_view_id), "filterCond": "", "sort": ""}
            merged = dict(existing)
            merged.update({key: value for key, value in view.items() if key != "id"})
            merged["name"] = name
            merged["index"] = str(merged["index"])
            updated[name] = merged

        app["preview"]["views"] = updated
        return {
            "views": {name: {"id": view["id"]} for name, view in updated.items()},
            "revision": str(app["revision"]),
        }

    # Field ACL

    def _get_field_acl(self, params, preview):
        app = self._app(params)
        return {"rights": self._tier(params, preview)["field_acl"], "revision": str(app["revision"])}

    def _put_field_acl(self, params, preview):
        app = self._write(params, preview)
        app["preview"]["field_acl"] = params["rights"]
        return {"revision": str(app["revision"])}

    # Deploy

    def _post_app_deploy(self, params, preview):
        assert preview
        conflicts = {}
        for index, entry in enumerate(params["apps"]):
            app = self._app(entry)
            revision = entry.get("revision")
            if revision is not None and str(revision) != str(app["revision"]):
                conflicts[f"apps[{index}].revision"] = {"messages": ["The revision is not the latest."]}
                continue

            app_id = str(entry["app"])
            if params.get("revert"):
                app["preview"] = copy.deepcopy(app["live"])
                self.deploy_status[app_id] = "CANCEL"
            else:
                app["live"] = copy.deepcopy(app["preview"])
                self.deploy_status[app_id] = "PROCESSING"

        if conflicts:
            raise KintoneAPIError(
                409,
                "The revision is not the latest.",
                code="GAIA_CO02",
                error_id="conflict-2",
                errors=conflicts,
            )
        return {}

    def _get_app_deploy(self, params, preview):
        assert preview
        return {
            "apps": [
                {"app": str(app_id), "status": self.deploy_status.get(str(app_id), "SUCCESS")}
                for app_id in params["apps"]
            ]
        }

    # Apps and spaces

    def _get_space(self, params, preview):
        space_id = str(params["id"])
        if space_id not in self.spaces:
            raise KintoneAPIError(404, "The space does not exist.", code="GAIA_IL01")
        return self.spaces[space_id]

    def _post_app(self, params, preview):
        assert preview, "apps are created in preview"
        self.next_app_id += 1
        app = self.add_app(self.next_app_id, revision=2)
        app["name"] = params["name"]
        app["space"] = params.get("space")
        app["thread"] = params.get("thread")
        return {"app": str(self.next_app_id), "revision": str(app["revision"])}

    def _get_app(self, params, preview):
        app = self._app(params, key="id")
        return {
            "appId": str(params["id"]),
            "code": "",
            "name": app["name"],
            "description": "",
            "spaceId": app.get("space"),
            "threadId": app.get("thread"),
        }


@pytest.fixture
def server():
    """In-memory kintone server with app 1 at revision 3"""
    fake = FakeKintoneServer()
    fake.add_app("1", properties={"title": {"type": "SINGLE_LINE_TEXT", "code": "title", "label": "Title"}})
    fake.add_app("2")
    fake.add_app("3")
    return fake


@pytest.fixture
def client(server):
    """AppClient talking to the in-memory server"""
    return AppClient(server)
