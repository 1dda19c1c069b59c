"""
Pydantic schemas for emit gateway requests.
"""
from typing import Annotated, Any, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def _unique_ids(values: List[Any]) -> List[str]:
    """Trim, drop blanks and non-strings, de-duplicate keeping first-seen order."""
    seen = {}
    for value in values:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


class _EmitBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event: str
    payload: Any = None

    @field_validator("event")
    @classmethod
    def event_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("event must be a non-empty string")
        return v


class WorkspaceEmit(_EmitBase):
    """Broadcast to every authenticated connection."""
    scope: Literal["workspace"]


class UserEmit(_EmitBase):
    """Broadcast to all connections of one user."""
    scope: Literal["user"]
    user_id: str = Field(alias="userId")

    @field_validator("user_id")
    @classmethod
    def user_id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("userId must be a non-empty string")
        return v


class UsersEmit(_EmitBase):
    """Broadcast to the union of several users' connections."""
    scope: Literal["users"]
    user_ids: List[Any] = Field(alias="userIds", min_length=1)

    @field_validator("user_ids")
    @classmethod
    def normalize_user_ids(cls, v: List[Any]) -> List[str]:
        ids = _unique_ids(v)
        if not ids:
            raise ValueError("userIds must contain at least one valid id")
        return ids


EmitRequest = Annotated[
    Union[WorkspaceEmit, UserEmit, UsersEmit],
    Field(discriminator="scope"),
]

emit_request_adapter = TypeAdapter(EmitRequest)
