#!/usr/bin/env python3
"""
Models for the deploy state machine.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from kapp.schemas.base import KintoneModel, Revision


class DeployStatus(str, Enum):
    """PROCESSING moves to exactly one of the terminal states."""

    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"
    CANCEL = "CANCEL"

    @property
    def is_terminal(self) -> bool:
        return self is not DeployStatus.PROCESSING


class DeployTarget(KintoneModel):
    app: str
    revision: Optional[Revision] = None


class AppDeployStatus(KintoneModel):
    app: str
    status: DeployStatus


class DeployStatusResponse(KintoneModel):
    apps: List[AppDeployStatus] = Field(default_factory=list)
