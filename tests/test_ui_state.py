"""Tests for the Streamlit session-state glue around the upload tracker.

``st`` is patched with a plain dict for ``session_state`` and the API client is
a mock, so no Streamlit runtime or backend is needed.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from dropvault.api.schemas.auth import SessionRead, UserRead
from dropvault.ui import state
from dropvault.ui.api_client import APIError
from dropvault.uploads.tracker import EntryStatus


def _uploaded(name: str, content: bytes, mime: str | None = "text/plain"):
    return SimpleNamespace(name=name, type=mime, size=len(content), getvalue=lambda: content)


@pytest.fixture
def fake_st():
    with patch("dropvault.ui.state.st") as mock_st:
        mock_st.session_state = {}
        state.init_session()
        yield mock_st


@pytest.fixture
def api():
    client = MagicMock()
    with patch("dropvault.ui.state.get_client", return_value=client):
        yield client


def _finish(now_offset: float = 1000.0) -> None:
    scheduler = state.get_upload_session().scheduler
    state.pump_uploads(scheduler.now + now_offset)


def test_stage_uploads_keeps_bytes_only_for_accepted(fake_st, monkeypatch):
    monkeypatch.setattr(state.settings, "MAX_UPLOAD_BYTES", 4)
    result = state.stage_uploads([_uploaded("ok.txt", b"1234"), _uploaded("big.txt", b"12345")])

    assert [c.name for c in result.accepted] == ["ok.txt"]
    assert set(fake_st.session_state["pending_uploads"]) == {"ok.txt"}
    session = state.get_upload_session()
    assert session.get("big.txt").status is EntryStatus.ERROR


def test_ready_file_is_pushed_to_backend(fake_st, api):
    state.stage_uploads([_uploaded("a.txt", b"abc")])
    _finish()

    api.upload_file.assert_called_once_with("a.txt", b"abc", "text/plain")
    assert fake_st.session_state["pending_uploads"] == {}
    assert state.pop_notices() == [("success", "Uploaded a.txt")]
    assert state.pop_notices() == []


def test_missing_mime_defaults_to_octet_stream(fake_st, api):
    state.stage_uploads([_uploaded("blob", b"x", mime=None)])
    _finish()
    api.upload_file.assert_called_once_with("blob", b"x", "application/octet-stream")


def test_backend_failure_becomes_error_notice(fake_st, api):
    api.upload_file.side_effect = APIError(500, "disk full")
    state.stage_uploads([_uploaded("a.txt", b"abc")])
    _finish()
    assert state.pop_notices() == [("error", "Failed to upload a.txt: disk full")]


def test_dismissed_upload_never_reaches_backend(fake_st, api):
    state.stage_uploads([_uploaded("a.txt", b"abc")])
    state.dismiss_upload("a.txt")
    _finish()

    api.upload_file.assert_not_called()
    assert "a.txt" not in state.get_upload_session()
    assert fake_st.session_state["pending_uploads"] == {}


def test_duplicate_names_push_latest_bytes_once(fake_st, api):
    state.stage_uploads([_uploaded("a.txt", b"old"), _uploaded("a.txt", b"newer")])
    _finish()
    api.upload_file.assert_called_once_with("a.txt", b"newer", "text/plain")


def test_auth_roundtrip_and_sign_out_drops_uploads(fake_st, api):
    session = SessionRead(
        token="tok", expires_at="2030-01-01T00:00:00",
        user=UserRead(id=1, email="alice@example.com"),
    )
    state.set_auth(session)
    assert state.get_token() == "tok"
    assert state.get_user_email() == "alice@example.com"

    state.stage_uploads([_uploaded("a.txt", b"abc")])
    tracker = state.get_upload_session()
    state.clear_auth()

    assert state.get_token() is None
    assert "upload_session" not in fake_st.session_state
    assert len(tracker) == 0
    api.upload_file.assert_not_called()
