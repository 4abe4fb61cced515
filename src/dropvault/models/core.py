"""ORM tables. Timestamps are naive UTC."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, UniqueConstraint


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    password_salt: str
    created_at: datetime = Field(default_factory=_utcnow)


class AuthSession(SQLModel, table=True):
    """Opaque bearer token. Also used for one-shot password-reset tokens."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    token: str = Field(index=True, unique=True)
    purpose: str = Field(default="login")  # login | reset
    expires_at: datetime
    revoked: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utcnow)


class VaultFile(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("owner_id", "name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    name: str
    path: str
    mime_type: str
    size_bytes: int
    content_hash: str
    tags: str = Field(default="")
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)
