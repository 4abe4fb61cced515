"""FastAPI dependencies."""
from __future__ import annotations
from typing import Generator
from fastapi import Depends, Header
from dropvault.api.schemas.auth import UserRead
from dropvault.domain.exceptions import AuthError
from dropvault.infra.db.uow import UnitOfWork
from dropvault.services.auth_service import AuthService


def get_uow() -> Generator[UnitOfWork, None, None]:
    """Yield one UnitOfWork per request; commit/rollback in __exit__."""
    with UnitOfWork() as uow:
        yield uow


def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Missing or malformed Authorization header")
    return authorization.split(" ", 1)[1].strip()


def get_current_user(
    token: str = Depends(get_bearer_token),
    uow: UnitOfWork = Depends(get_uow),
) -> UserRead:
    return AuthService(uow).authenticate(token)
