"""Auth DTOs."""
from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field, field_validator

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Credentials(BaseModel):
    email: str = Field(pattern=_EMAIL_PATTERN, max_length=320)
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    email: str
    created_at: datetime | None = None


class SessionRead(BaseModel):
    token: str
    expires_at: datetime
    user: UserRead


class PasswordResetRequest(BaseModel):
    email: str = Field(pattern=_EMAIL_PATTERN, max_length=320)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class PasswordResetAccepted(BaseModel):
    status: Literal["accepted"] = "accepted"


class PasswordResetConfirm(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=128)
