#!/usr/bin/env python3
"""
Models for the views facet.

Views are a closed union on `type`. Each read variant has a `...ForUpdate`
sibling where everything except `type` and `index` is optional, so an update
can change a single attribute. An update may also carry the `id` returned by
a previous update to address a view whose name changes in the same request.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field

from kapp.schemas.base import KintoneModel

Device = Literal["DESKTOP", "ANY"]


class ViewBase(KintoneModel):
    builtin_type: Optional[Literal["ASSIGNEE"]] = None
    name: str
    id: str
    filter_cond: str = ""
    sort: str = ""
    index: str


class ListView(ViewBase):
    type: Literal["LIST"] = "LIST"
    fields: List[str] = Field(default_factory=list)


class CalendarView(ViewBase):
    type: Literal["CALENDAR"] = "CALENDAR"
    date: str
    title: str


class CustomView(ViewBase):
    type: Literal["CUSTOM"] = "CUSTOM"
    html: str = ""
    pager: bool = True
    device: Device = "DESKTOP"


View = Annotated[Union[ListView, CalendarView, CustomView], Field(discriminator="type")]


class ViewBaseForUpdate(KintoneModel):
    # Position among the views, or the id string the server returned
    index: Union[int, str]
    id: Optional[str] = None
    name: Optional[str] = None
    filter_cond: Optional[str] = None
    sort: Optional[str] = None


class ListViewForUpdate(ViewBaseForUpdate):
    type: Literal["LIST"] = "LIST"
    fields: Optional[List[str]] = None


class CalendarViewForUpdate(ViewBaseForUpdate):
    type: Literal["CALENDAR"] = "CALENDAR"
    date: Optional[str] = None
    title: Optional[str] = None


class CustomViewForUpdate(ViewBaseForUpdate):
    type: Literal["CUSTOM"] = "CUSTOM"
    html: Optional[str] = None
    pager: Optional[bool] = None
    device: Optional[Device] = None


ViewForUpdate = Annotated[
    Union[ListViewForUpdate, CalendarViewForUpdate, CustomViewForUpdate],
    Field(discriminator="type"),
]


class ViewsResponse(KintoneModel):
    views: Dict[str, View]
    revision: str


class ViewId(KintoneModel):
    id: str


class UpdateViewsResponse(KintoneModel):
    """Server-assigned id per view name, plus the new preview revision."""

    views: Dict[str, ViewId] = Field(default_factory=dict)
    revision: str
