from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class RegisterIn(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ProfileOut(UserOut):
    created_at: datetime


class AuthOut(BaseModel):
    message: str
    token: str
    user: UserOut


class TodoCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class TodoUpdate(BaseModel):
    """Full replacement: fields left out are written as null / not completed."""

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class TodoOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str]
    completed: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("completed", mode="before")
    @classmethod
    def completed_as_flag(cls, v) -> int:
        return 1 if v else 0


class MessageOut(BaseModel):
    message: str
