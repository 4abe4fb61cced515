"""Repository for User and AuthSession records. Caller owns the transaction."""
from __future__ import annotations
from datetime import datetime
from sqlmodel import Session, select
from dropvault.models.core import AuthSession, User


class UserRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_by_id(self, user_id: int) -> User | None:
        return self._s.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self._s.exec(select(User).where(User.email == email)).first()

    def create(self, *, email: str, password_hash: str, password_salt: str) -> User:
        user = User(email=email, password_hash=password_hash, password_salt=password_salt)
        self._s.add(user)
        self._s.flush()
        return user

    def update_password(self, user: User, *, password_hash: str, password_salt: str) -> User:
        user.password_hash = password_hash
        user.password_salt = password_salt
        self._s.add(user)
        self._s.flush()
        return user


class AuthSessionRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_active(self, token: str, purpose: str, now: datetime) -> AuthSession | None:
        return self._s.exec(
            select(AuthSession).where(
                AuthSession.token == token,
                AuthSession.purpose == purpose,
                AuthSession.revoked == False,  # noqa: E712
                AuthSession.expires_at > now,
            )
        ).first()

    def create(self, *, user_id: int, token: str, purpose: str, expires_at: datetime) -> AuthSession:
        record = AuthSession(user_id=user_id, token=token, purpose=purpose, expires_at=expires_at)
        self._s.add(record)
        self._s.flush()
        return record

    def revoke(self, record: AuthSession) -> None:
        record.revoked = True
        self._s.add(record)
        self._s.flush()

    def revoke_all(self, user_id: int, purpose: str) -> int:
        records = self._s.exec(
            select(AuthSession).where(
                AuthSession.user_id == user_id,
                AuthSession.purpose == purpose,
                AuthSession.revoked == False,  # noqa: E712
            )
        ).all()
        for record in records:
            record.revoked = True
            self._s.add(record)
        self._s.flush()
        return len(records)
