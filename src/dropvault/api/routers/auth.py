"""Auth router."""
from fastapi import APIRouter, Depends, Response
from dropvault.api.deps import get_bearer_token, get_current_user, get_uow
from dropvault.api.schemas.auth import (
    Credentials, PasswordResetAccepted, PasswordResetConfirm,
    PasswordResetRequest, SessionRead, UserRead,
)
from dropvault.infra.db.uow import UnitOfWork
from dropvault.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=SessionRead, status_code=201)
def signup(payload: Credentials, uow: UnitOfWork = Depends(get_uow)) -> SessionRead:
    return AuthService(uow).signup(payload)


@router.post("/login", response_model=SessionRead)
def login(payload: Credentials, uow: UnitOfWork = Depends(get_uow)) -> SessionRead:
    return AuthService(uow).login(payload)


@router.post("/logout", status_code=204)
def logout(token: str = Depends(get_bearer_token), uow: UnitOfWork = Depends(get_uow)) -> Response:
    AuthService(uow).logout(token)
    return Response(status_code=204)


@router.get("/me", response_model=UserRead)
def me(user: UserRead = Depends(get_current_user)) -> UserRead:
    return user


@router.post("/password-reset", response_model=PasswordResetAccepted, status_code=202)
def password_reset(
    payload: PasswordResetRequest, uow: UnitOfWork = Depends(get_uow),
) -> PasswordResetAccepted:
    AuthService(uow).request_password_reset(payload.email)
    return PasswordResetAccepted()


@router.post("/password-reset/confirm", status_code=204)
def password_reset_confirm(
    payload: PasswordResetConfirm, uow: UnitOfWork = Depends(get_uow),
) -> Response:
    AuthService(uow).confirm_password_reset(payload.token, payload.password)
    return Response(status_code=204)
