"""Auth use-case service: signup, login, bearer-token sessions, password reset.

Passwords are stored as PBKDF2-SHA256 digests with a per-user salt. Tokens are
opaque random strings persisted in ``AuthSession`` rows.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone

from dropvault.api.schemas.auth import Credentials, SessionRead, UserRead
from dropvault.config import settings
from dropvault.domain.exceptions import AuthError, ConflictError
from dropvault.infra.db.repositories.user_repository import AuthSessionRepository, UserRepository
from dropvault.infra.db.uow import UnitOfWork

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 200_000
SALT_BYTES = 16
RESET_TTL = timedelta(hours=1)

PURPOSE_LOGIN = "login"
PURPOSE_RESET = "reset"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS
    )
    return digest.hex()


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    return hmac.compare_digest(hash_password(password, salt), expected_hash)


class AuthService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def signup(self, payload: Credentials) -> SessionRead:
        users = UserRepository(self._uow.session)
        if users.get_by_email(payload.email) is not None:
            raise ConflictError(f"Email {payload.email} is already registered")
        salt = secrets.token_hex(SALT_BYTES)
        user = users.create(
            email=payload.email,
            password_hash=hash_password(payload.password, salt),
            password_salt=salt,
        )
        session = self._issue(user.id, PURPOSE_LOGIN, timedelta(hours=settings.SESSION_TTL_HOURS))
        self._uow.commit()
        logger.info("Registered user %s", user.id)
        return SessionRead(
            token=session.token,
            expires_at=session.expires_at,
            user=UserRead.model_validate(user),
        )

    def login(self, payload: Credentials) -> SessionRead:
        users = UserRepository(self._uow.session)
        user = users.get_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_salt, user.password_hash):
            raise AuthError("Invalid email or password")
        session = self._issue(user.id, PURPOSE_LOGIN, timedelta(hours=settings.SESSION_TTL_HOURS))
        self._uow.commit()
        return SessionRead(
            token=session.token,
            expires_at=session.expires_at,
            user=UserRead.model_validate(user),
        )

    def authenticate(self, token: str) -> UserRead:
        record = AuthSessionRepository(self._uow.session).get_active(token, PURPOSE_LOGIN, _utcnow())
        if record is None:
            raise AuthError("Not authenticated")
        user = UserRepository(self._uow.session).get_by_id(record.user_id)
        if user is None:
            raise AuthError("Not authenticated")
        return UserRead.model_validate(user)

    def logout(self, token: str) -> None:
        sessions = AuthSessionRepository(self._uow.session)
        record = sessions.get_active(token, PURPOSE_LOGIN, _utcnow())
        if record is not None:
            sessions.revoke(record)
            self._uow.commit()

    def request_password_reset(self, email: str) -> str | None:
        """Issue a one-hour reset token for a known email; ``None`` otherwise.

        Callers must not reveal which case occurred.
        """
        user = UserRepository(self._uow.session).get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None
        record = self._issue(user.id, PURPOSE_RESET, RESET_TTL)
        self._uow.commit()
        # No mail transport: the token is handed to the operator log.
        logger.info("Password reset token issued for user %s: %s", user.id, record.token)
        return record.token

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        sessions = AuthSessionRepository(self._uow.session)
        record = sessions.get_active(token, PURPOSE_RESET, _utcnow())
        if record is None:
            raise AuthError("Reset token is invalid or expired")
        users = UserRepository(self._uow.session)
        user = users.get_by_id(record.user_id)
        if user is None:
            raise AuthError("Reset token is invalid or expired")
        salt = secrets.token_hex(SALT_BYTES)
        users.update_password(user, password_hash=hash_password(new_password, salt), password_salt=salt)
        sessions.revoke(record)
        revoked = sessions.revoke_all(user.id, PURPOSE_LOGIN)
        self._uow.commit()
        logger.info("Password reset for user %s; revoked %d login session(s)", user.id, revoked)

    def _issue(self, user_id: int, purpose: str, ttl: timedelta):
        return AuthSessionRepository(self._uow.session).create(
            user_id=user_id,
            token=secrets.token_urlsafe(32),
            purpose=purpose,
            expires_at=_utcnow() + ttl,
        )
