"""Session-state helpers for the Streamlit UI.

No ORM, no DB; only reads/writes ``st.session_state``.

The upload tracker runs on a ``ManualScheduler`` whose virtual clock is pushed
to ``time.monotonic()`` on every script rerun (``pump_uploads``). Bytes of
admitted files wait in ``pending_uploads`` until the tracker reports them
ready, then go to the backend.
"""
from __future__ import annotations

import time
from typing import Iterable, Optional, Protocol

import streamlit as st

from dropvault.api.schemas.auth import SessionRead
from dropvault.config import settings
from dropvault.logging import logger
from dropvault.ui.api_client import APIError, get_client
from dropvault.uploads.gate import CandidateFile, Partition
from dropvault.uploads.scheduler import ManualScheduler
from dropvault.uploads.tracker import FileReady, UploadSession


class UploadedFileLike(Protocol):
    name: str
    type: Optional[str]
    size: int

    def getvalue(self) -> bytes: ...


def init_session() -> None:
    """Initialize session state variables."""
    defaults = {
        "auth_token": None,
        "user_email": None,
        "uploader_key": 0,
        "pending_uploads": {},
        "notices": [],
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


# ----------------------------------------------------------------------
# Auth
# ----------------------------------------------------------------------

def get_token() -> Optional[str]:
    return st.session_state.get("auth_token")


def get_user_email() -> str:
    return st.session_state.get("user_email") or ""


def set_auth(session: SessionRead) -> None:
    st.session_state["auth_token"] = session.token
    st.session_state["user_email"] = session.user.email


def clear_auth() -> None:
    """Sign out locally: forget the token and drop the upload session."""
    st.session_state["auth_token"] = None
    st.session_state["user_email"] = None
    upload_session = st.session_state.pop("upload_session", None)
    if upload_session is not None:
        upload_session.reset()
    st.session_state["pending_uploads"] = {}


# ----------------------------------------------------------------------
# Uploads
# ----------------------------------------------------------------------

def get_upload_session() -> UploadSession:
    """Return this browser session's tracker, creating it on first use."""
    if "upload_session" not in st.session_state:
        session = UploadSession(
            ManualScheduler(start=time.monotonic()),
            tick_interval=settings.UPLOAD_TICK_INTERVAL,
            completion_delay=settings.UPLOAD_COMPLETION_DELAY,
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
        session.on_file_ready(_push_to_vault)
        st.session_state["upload_session"] = session
    return st.session_state["upload_session"]


def stage_uploads(uploaded: Iterable[UploadedFileLike]) -> Partition:
    """Turn uploader widget files into candidates and feed the tracker."""
    pending = st.session_state.setdefault("pending_uploads", {})
    batch: list[tuple[CandidateFile, bytes]] = []
    for uf in uploaded:
        candidate = CandidateFile(
            name=uf.name,
            size_bytes=uf.size,
            mime_type=uf.type or "application/octet-stream",
        )
        batch.append((candidate, uf.getvalue()))

    result = get_upload_session().ingest(c for c, _ in batch)
    accepted = {c.name for c in result.accepted}
    for candidate, content in batch:
        if candidate.name in accepted:
            pending[candidate.name] = content  # last write wins, like the tracker
    return result


def pump_uploads(now: Optional[float] = None) -> int:
    """Advance the tracker clock to *now* (default: monotonic wall clock)."""
    scheduler: ManualScheduler = get_upload_session().scheduler
    return scheduler.run_until(time.monotonic() if now is None else now)


def dismiss_upload(name: str) -> None:
    get_upload_session().dismiss(name)
    st.session_state.setdefault("pending_uploads", {}).pop(name, None)


def pop_notices() -> list[tuple[str, str]]:
    notices = st.session_state.get("notices", [])
    st.session_state["notices"] = []
    return notices


def _push_to_vault(event: FileReady) -> None:
    content = st.session_state.setdefault("pending_uploads", {}).pop(event.name, None)
    if content is None:
        return
    notices = st.session_state.setdefault("notices", [])
    try:
        get_client().upload_file(event.name, content, event.mime_type)
    except APIError as e:
        logger.warning("Vault upload failed for %s: %s", event.name, e)
        notices.append(("error", f"Failed to upload {event.name}: {e.detail}"))
    else:
        notices.append(("success", f"Uploaded {event.name}"))
