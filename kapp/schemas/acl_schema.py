#!/usr/bin/env python3
"""
Models for the field and record access control facets.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from kapp.schemas.base import KintoneModel

RightEntityType = Literal["USER", "GROUP", "ORGANIZATION", "FIELD_ENTITY"]


class RightEntityRef(KintoneModel):
    code: str
    type: RightEntityType


class FieldRightEntity(KintoneModel):
    accessibility: Literal["READ", "WRITE", "NONE"]
    include_subs: bool = False
    entity: RightEntityRef


class FieldRightEntityForUpdate(FieldRightEntity):
    # Defaults server-side when omitted
    include_subs: Optional[bool] = None


class FieldRight(KintoneModel):
    code: str
    entities: List[FieldRightEntity] = Field(default_factory=list)


class FieldRightForUpdate(KintoneModel):
    code: str
    entities: List[FieldRightEntityForUpdate] = Field(default_factory=list)


class FieldAclResponse(KintoneModel):
    rights: List[FieldRight]
    revision: str


class RecordRightEntity(KintoneModel):
    entity: RightEntityRef
    viewable: bool
    editable: bool
    deletable: bool
    include_subs: bool = False


class RecordRight(KintoneModel):
    filter_cond: str = ""
    entities: List[RecordRightEntity] = Field(default_factory=list)


class RecordAclResponse(KintoneModel):
    rights: List[RecordRight]
    revision: str


class RecordPermissions(KintoneModel):
    viewable: bool
    editable: bool
    deletable: bool


class RecordRights(KintoneModel):
    """Effective rights of one record, computed from the live ACL."""

    id: str
    record: RecordPermissions
    fields: Dict[str, Any] = Field(default_factory=dict)


class EvaluateRecordsAclResponse(KintoneModel):
    rights: List[RecordRights]
