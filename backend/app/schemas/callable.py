"""
app/schemas/callable.py
Firebase callable envelope and the payloads of each callable.

| Callable              | Payload                    |
|-----------------------|----------------------------|
| updateEmailVerified   | `uid`                      |
| createUserWithRole    | `email`, `password`, `role`|
| deleteUserWithRole    | `uid`                      |
| editUserRole          | `uid`, `role`              |
| addUserRoleByEmail    | `email`, `role`            |
"""
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class CallableRequest(BaseModel, Generic[T]):
    data: T


class CallableResponse(BaseModel):
    result: Any = None


class UidIn(BaseModel):
    uid: str = Field(..., description="Firebase UID")


class CreateUserWithRoleIn(BaseModel):
    email: str
    password: str
    role: str


class EditUserRoleIn(BaseModel):
    uid: str = Field(..., description="Firebase UID")
    role: str


class AddUserRoleByEmailIn(BaseModel):
    email: str
    role: str


def write_result_out(result) -> Optional[dict]:
    """Firestore WriteResult -> `{"updateTime": ISO-8601}`; anything without a time -> None."""
    update_time = getattr(result, "update_time", None)
    if update_time is None:
        return None
    return {"updateTime": update_time.isoformat()}
