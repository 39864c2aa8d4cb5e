#!/usr/bin/env python3
"""
Schema editor for kintone apps

This module reads and stages changes to an app's schema facets: form fields,
form layout, views, process management, field ACL and record ACL.

Reads target the live configuration unless `preview=True` is passed. Writes
always target the preview configuration and return the facet's new revision,
which must be carried forward to the next write of the same facet.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from kapp.client_base import ClientBase, compact
from kapp.constants import APPS_LIMIT
from kapp.paths import Tier
from kapp.schemas import (
    App,
    AppsResponse,
    EvaluateRecordsAclResponse,
    FieldAclResponse,
    FieldRightForUpdate,
    FormFieldsResponse,
    FormLayoutResponse,
    Lang,
    ProcessManagementResponse,
    RecordAclResponse,
    Revision,
    RevisionResponse,
    UpdateViewsResponse,
    ViewsResponse,
    to_payload,
)

AppID = Union[str, int]


class SchemaEditor(ClientBase):
    """
    Issues one request per facet operation.
    Implements preview/live routing and revision threading.
    """

    # Form fields

    def get_form_fields(
        self, app: AppID, lang: Optional[Lang] = None, preview: bool = False
    ) -> FormFieldsResponse:
        """
        Get the form field definitions of an app.

        Args:
            app: App id
            lang: Display language of labels ("ja", "en", "zh", "user", "default")
            preview: Read the preview configuration instead of the live one

        Returns:
            FormFieldsResponse with `properties` keyed by field code and `revision`
        """
        path = self._path("form_fields", Tier.from_flag(preview))
        response = self._call("get", path, compact({"app": app, "lang": lang}))
        return FormFieldsResponse.model_validate(response)

    def add_form_fields(
        self, app: AppID, properties: Dict[str, Any], revision: Optional[Revision] = None
    ) -> RevisionResponse:
        """
        Add fields to the preview form.

        Args:
            app: App id
            properties: Field definitions keyed by field code
            revision: Expected preview revision, or None to skip the check

        Returns:
            RevisionResponse with the new preview revision
        """
        path = self._path("form_fields", Tier.PREVIEW)
        params = compact({"app": app, "properties": to_payload(properties), "revision": revision})
        response = self._call("post", path, params)
        logger.debug(f"Added {len(properties)} field(s) to app {app}")
        return RevisionResponse.model_validate(response)

    def update_form_fields(
        self, app: AppID, properties: Dict[str, Any], revision: Optional[Revision] = None
    ) -> RevisionResponse:
        """Update field definitions in the preview form."""
        path = self._path("form_fields", Tier.PREVIEW)
        params = compact({"app": app, "properties": to_payload(properties), "revision": revision})
        return RevisionResponse.model_validate(self._call("put", path, params))

    def delete_form_fields(
        self, app: AppID, fields: Sequence[str], revision: Optional[Revision] = None
    ) -> RevisionResponse:
        """
        Delete fields from the preview form.

        Args:
            app: App id
            fields: Field codes to delete
            revision: Expected preview revision, or None to skip the check

        Returns:
            RevisionResponse with the new preview revision
        """
        path = self._path("form_fields", Tier.PREVIEW)
        params = compact({"app": app, "fields": list(fields), "revision": revision})
        return RevisionResponse.model_validate(self._call("delete", path, params))

    # Form layout

    def get_form_layout(self, app: AppID, preview: bool = False) -> FormLayoutResponse:
        path = self._path("form_layout", Tier.from_flag(preview))
        return FormLayoutResponse.model_validate(self._call("get", path, {"app": app}))

    def update_form_layout(
        self, app: AppID, layout: List[Dict[str, Any]], revision: Optional[Revision] = None
    ) -> RevisionResponse:
        """Replace the preview form layout."""
        path = self._path("form_layout", Tier.PREVIEW)
        params = compact({"app": app, "layout": to_payload(layout), "revision": revision})
        return RevisionResponse.model_validate(self._call("put", path, params))

    # Views

    def get_views(
        self, app: AppID, lang: Optional[Lang] = None, preview: bool = False
    ) -> ViewsResponse:
        path = self._path("views", Tier.from_flag(preview))
        response = self._call("get", path, compact({"app": app, "lang": lang}))
        return ViewsResponse.model_validate(response)

    def update_views(
        self, app: AppID, views: Dict[str, Any], revision: Optional[Revision] = None
    ) -> UpdateViewsResponse:
        """
        Update the preview views.

        Views are keyed by name. An entry may carry the `id` returned by a
        previous call, which lets the same request rename that view.

        Args:
            app: App id
            views: ViewForUpdate models (or equivalent dicts) keyed by view name
            revision: Expected preview revision, or None to skip the check

        Returns:
            UpdateViewsResponse with the id of each view and the new revision
        """
        path = self._path("views", Tier.PREVIEW)
        params = compact({"app": app, "views": to_payload(views), "revision": revision})
        return UpdateViewsResponse.model_validate(self._call("put", path, params))

    # Apps

    def get_app(self, id: AppID) -> App:
        path = self._path("app")
        return App.model_validate(self._call("get", path, {"id": id}))

    def get_apps(
        self,
        ids: Optional[Sequence[AppID]] = None,
        codes: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        space_ids: Optional[Sequence[AppID]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> AppsResponse:
        """
        Search apps.

        Args:
            ids: App ids to match
            codes: App codes to match
            name: Partial app name
            space_ids: Space ids the apps belong to
            limit: Page size (max 100)
            offset: Number of apps to skip

        Returns:
            AppsResponse with the matching apps
        """
        path = self._path("apps")
        params = compact({
            "ids": list(ids) if ids else None,
            "codes": list(codes) if codes else None,
            "name": name,
            "spaceIds": list(space_ids) if space_ids else None,
            "limit": limit,
            "offset": offset,
        })
        return AppsResponse.model_validate(self._call("get", path, params))

    def get_all_apps(
        self,
        ids: Optional[Sequence[AppID]] = None,
        codes: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        space_ids: Optional[Sequence[AppID]] = None,
    ) -> List[App]:
        """
        Search apps across all pages.

        Returns:
            List of apps from all pages
        """
        all_apps = []
        offset = 0

        while True:
            page = self.get_apps(
                ids=ids, codes=codes, name=name, space_ids=space_ids,
                limit=APPS_LIMIT, offset=offset,
            )
            all_apps.extend(page.apps)

            if len(page.apps) < APPS_LIMIT:
                break

            offset += APPS_LIMIT
            logger.debug(f"Fetched {len(all_apps)} apps, continuing at offset={offset}")

        return all_apps

    # Process management

    def get_process_management(
        self, app: AppID, lang: Optional[Lang] = None, preview: bool = False
    ) -> ProcessManagementResponse:
        path = self._path("process_management", Tier.from_flag(preview))
        response = self._call("get", path, compact({"app": app, "lang": lang}))
        return ProcessManagementResponse.model_validate(response)

    # Access control

    def get_field_acl(self, app: AppID, preview: bool = False) -> FieldAclResponse:
        path = self._path("field_acl", Tier.from_flag(preview))
        return FieldAclResponse.model_validate(self._call("get", path, {"app": app}))

    def update_field_acl(
        self,
        app: AppID,
        rights: List[Union[FieldRightForUpdate, Dict[str, Any]]],
        revision: Optional[Revision] = None,
    ) -> RevisionResponse:
        """
        Replace the preview field ACL.

        Always written to preview: the live endpoint would also deploy every
        other pending preview change of the app.

        Args:
            app: App id
            rights: Field right rules in evaluation order
            revision: Expected preview revision, or None to skip the check

        Returns:
            RevisionResponse with the new preview revision
        """
        path = self._path("field_acl", Tier.PREVIEW)
        params = compact({"app": app, "rights": to_payload(rights), "revision": revision})
        return RevisionResponse.model_validate(self._call("put", path, params))

    def get_record_acl(
        self, app: AppID, lang: Optional[Lang] = None, preview: bool = False
    ) -> RecordAclResponse:
        path = self._path("record_acl", Tier.from_flag(preview))
        response = self._call("get", path, compact({"app": app, "lang": lang}))
        return RecordAclResponse.model_validate(response)

    def evaluate_records_acl(self, app: AppID, ids: Sequence[AppID]) -> EvaluateRecordsAclResponse:
        """
        Compute the effective rights of records under the live ACL.

        Args:
            app: App id
            ids: Record ids

        Returns:
            EvaluateRecordsAclResponse with one entry per record
        """
        path = self._path("evaluate_records_acl")
        response = self._call("get", path, {"app": app, "ids": list(ids)})
        return EvaluateRecordsAclResponse.model_validate(response)
