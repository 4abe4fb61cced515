"""Typed HTTP client for Streamlit pages.

Only imports from ``dropvault.api.schemas``; never ORM, never DB.
Instantiate via ``get_client()`` which caches per Streamlit session.
"""
from __future__ import annotations

import httpx
import streamlit as st

from dropvault.api.schemas.auth import SessionRead, UserRead
from dropvault.api.schemas.files import FileList, FileRead
from dropvault.config import settings


class APIError(Exception):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


class DropVaultClient:
    """One method per backend endpoint. All return pure Pydantic DTOs."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url or settings.API_BASE_URL, timeout=30.0, transport=transport,
        )
        self._token = token

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        self._token = token

    def _headers(self) -> dict[str, str]:
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        raise APIError(resp.status_code, str(detail))

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def signup(self, email: str, password: str) -> SessionRead:
        resp = self._client.post("/auth/signup", json={"email": email, "password": password})
        self._raise_for_status(resp)
        session = SessionRead.model_validate(resp.json())
        self._token = session.token
        return session

    def login(self, email: str, password: str) -> SessionRead:
        resp = self._client.post("/auth/login", json={"email": email, "password": password})
        self._raise_for_status(resp)
        session = SessionRead.model_validate(resp.json())
        self._token = session.token
        return session

    def logout(self) -> None:
        if self._token is None:
            return
        resp = self._client.post("/auth/logout", headers=self._headers())
        self._token = None
        self._raise_for_status(resp)

    def me(self) -> UserRead:
        resp = self._client.get("/auth/me", headers=self._headers())
        self._raise_for_status(resp)
        return UserRead.model_validate(resp.json())

    def request_password_reset(self, email: str) -> None:
        resp = self._client.post("/auth/password-reset", json={"email": email})
        self._raise_for_status(resp)

    def confirm_password_reset(self, token: str, password: str) -> None:
        resp = self._client.post(
            "/auth/password-reset/confirm", json={"token": token, "password": password},
        )
        self._raise_for_status(resp)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def list_files(self, limit: int = 20, offset: int = 0) -> FileList:
        resp = self._client.get(
            "/files", params={"limit": limit, "offset": offset}, headers=self._headers(),
        )
        self._raise_for_status(resp)
        return FileList.model_validate(resp.json())

    def get_file(self, file_id: int) -> FileRead:
        resp = self._client.get(f"/files/{file_id}", headers=self._headers())
        self._raise_for_status(resp)
        return FileRead.model_validate(resp.json())

    def upload_file(self, filename: str, content: bytes, content_type: str) -> FileRead:
        resp = self._client.post(
            "/files/upload",
            files={"file": (filename, content, content_type)},
            headers=self._headers(),
        )
        self._raise_for_status(resp)
        return FileRead.model_validate(resp.json())

    def download_file(self, file_id: int) -> bytes:
        resp = self._client.get(f"/files/{file_id}/content", headers=self._headers())
        self._raise_for_status(resp)
        return resp.content

    def rename_file(self, file_id: int, name: str) -> FileRead:
        resp = self._client.patch(f"/files/{file_id}", json={"name": name}, headers=self._headers())
        self._raise_for_status(resp)
        return FileRead.model_validate(resp.json())

    def delete_file(self, file_id: int) -> None:
        resp = self._client.delete(f"/files/{file_id}", headers=self._headers())
        self._raise_for_status(resp)

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def health(self) -> dict:
        resp = self._client.get("/health")
        self._raise_for_status(resp)
        return resp.json()


# ------------------------------------------------------------------
# Streamlit helper: one client per session
# ------------------------------------------------------------------

def get_client() -> DropVaultClient:
    """Return a cached ``DropVaultClient`` for the current Streamlit session."""
    if "dropvault_api_client" not in st.session_state:
        base_url = st.session_state.get("dropvault_api_url", settings.API_BASE_URL)
        st.session_state["dropvault_api_client"] = DropVaultClient(base_url=base_url)
    return st.session_state["dropvault_api_client"]
