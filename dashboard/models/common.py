"""Base model and field helpers for backend records."""
from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Backend records use camelCase keys; unknown keys are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def ref_id(value: Any) -> Any:
    """Collapse a populated reference (``{"_id": ...}``) to its id."""
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


def none_as_empty(value: Any) -> Any:
    return [] if value is None else value


RefId = Annotated[Optional[str], BeforeValidator(ref_id)]
StrList = Annotated[List[str], BeforeValidator(none_as_empty)]


def id_field(default: Any = ...) -> Any:
    """Record id, accepted as either ``_id`` or ``id``."""
    return Field(default, validation_alias=AliasChoices("_id", "id"))
