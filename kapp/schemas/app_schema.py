#!/usr/bin/env python3
"""
Models for apps and the form facets (fields and layout).
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from kapp.schemas.base import KintoneModel


class UserRef(KintoneModel):
    code: str
    name: str


class App(KintoneModel):
    """An app as returned by the app and apps endpoints."""

    app_id: str
    code: str = ""
    name: str
    description: str = ""
    space_id: Optional[str] = None
    thread_id: Optional[str] = None
    created_at: Optional[str] = None
    creator: Optional[UserRef] = None
    modified_at: Optional[str] = None
    modifier: Optional[UserRef] = None


class AppsResponse(KintoneModel):
    apps: List[App] = Field(default_factory=list)


class AddAppResponse(KintoneModel):
    """A created app starts in preview; `revision` is its preview revision."""

    app: str
    revision: str


class RevisionResponse(KintoneModel):
    """Response of a preview write: the facet's new revision."""

    revision: str


class FormFieldsResponse(KintoneModel):
    # Field definitions are keyed by field code; their shape depends on the field type
    properties: Dict[str, Dict[str, Any]]
    revision: str


class FormLayoutResponse(KintoneModel):
    layout: List[Dict[str, Any]]
    revision: str
