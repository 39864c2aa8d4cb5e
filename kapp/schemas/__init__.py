"""
Pydantic models for kintone app-schema payloads and responses
"""

from .acl_schema import (
    EvaluateRecordsAclResponse,
    FieldAclResponse,
    FieldRight,
    FieldRightEntity,
    FieldRightEntityForUpdate,
    FieldRightForUpdate,
    RecordAclResponse,
    RecordRight,
    RecordRightEntity,
    RecordRights,
)
from .app_schema import (
    AddAppResponse,
    App,
    AppsResponse,
    FormFieldsResponse,
    FormLayoutResponse,
    RevisionResponse,
)
from .base import KintoneModel, Lang, Revision, to_payload
from .deploy_schema import AppDeployStatus, DeployStatus, DeployStatusResponse, DeployTarget
from .process_schema import (
    Action,
    Assignee,
    AssigneeEntry,
    CreatorEntity,
    PrincipalEntity,
    ProcessManagementResponse,
    State,
)
from .view_schema import (
    CalendarView,
    CalendarViewForUpdate,
    CustomView,
    CustomViewForUpdate,
    ListView,
    ListViewForUpdate,
    UpdateViewsResponse,
    ViewsResponse,
)

__version__ = "0.1.0"
__all__ = [
    "Action",
    "AddAppResponse",
    "App",
    "AppDeployStatus",
    "AppsResponse",
    "Assignee",
    "AssigneeEntry",
    "CalendarView",
    "CalendarViewForUpdate",
    "CreatorEntity",
    "CustomView",
    "CustomViewForUpdate",
    "DeployStatus",
    "DeployStatusResponse",
    "DeployTarget",
    "EvaluateRecordsAclResponse",
    "FieldAclResponse",
    "FieldRight",
    "FieldRightEntity",
    "FieldRightEntityForUpdate",
    "FieldRightForUpdate",
    "FormFieldsResponse",
    "FormLayoutResponse",
    "KintoneModel",
    "Lang",
    "ListView",
    "ListViewForUpdate",
    "PrincipalEntity",
    "ProcessManagementResponse",
    "RecordAclResponse",
    "RecordRight",
    "RecordRightEntity",
    "RecordRights",
    "Revision",
    "RevisionResponse",
    "State",
    "UpdateViewsResponse",
    "ViewsResponse",
    "to_payload",
]
