#!/usr/bin/env python3
"""
Base model and payload helpers shared by the app-schema models.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Revisions are opaque; the API returns strings but accepts numbers too
Revision = Union[str, int]

# Display language of labels in facet reads
Lang = Literal["ja", "en", "zh", "user", "default"]


class KintoneModel(BaseModel):
    """
    Base for every model exchanged with the API.

    Wire names are camelCase, attributes are snake_case. Unknown keys are kept
    so fields added to the platform later survive a read-modify-write cycle.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


def to_payload(value: Any) -> Any:
    """
    Convert models (possibly nested in dicts and lists) into JSON-ready data.

    None-valued model fields are dropped, so optional update fields that were
    not set never reach the server.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    return value
