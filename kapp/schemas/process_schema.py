#!/usr/bin/env python3
"""
Models for the process management facet (states and actions).
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field

from kapp.schemas.base import KintoneModel

PrincipalType = Literal["USER", "GROUP", "ORGANIZATION", "FIELD_ENTITY", "CUSTOM_FIELD"]


class PrincipalEntity(KintoneModel):
    """A user, group, organization or field that can be assigned."""

    type: PrincipalType
    code: str


class CreatorEntity(KintoneModel):
    """The record creator. It never has a code."""

    type: Literal["CREATOR"] = "CREATOR"
    code: None = None


AssigneeEntity = Annotated[Union[PrincipalEntity, CreatorEntity], Field(discriminator="type")]


class AssigneeEntry(KintoneModel):
    entity: AssigneeEntity
    include_subs: bool = False


class Assignee(KintoneModel):
    type: Literal["ONE", "ALL", "ANY"]
    entities: List[AssigneeEntry] = Field(default_factory=list)


class State(KintoneModel):
    name: str
    index: str
    assignee: Optional[Assignee] = None


class Action(KintoneModel):
    name: str
    from_: str = Field(alias="from")
    to: str
    filter_cond: str = ""


class ProcessManagementResponse(KintoneModel):
    enable: bool
    states: Optional[Dict[str, State]] = None
    actions: Optional[List[Action]] = None
    revision: str
