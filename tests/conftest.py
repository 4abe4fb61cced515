"""Shared test fixtures.

  use_test_engine  redirects UoW + infra layer to a temp-file SQLite DB and
                   the blob store to a temp directory.
  client           FastAPI TestClient wired to the test engine.
  make_user        signs up a user and returns its bearer header.
  auth_headers     bearer header of a default user.
  manual           a ManualScheduler starting at t=0.
"""
import random

import pytest
from sqlmodel import SQLModel, create_engine


@pytest.fixture
def use_test_engine(tmp_path, monkeypatch):
    """Monkeypatch infra/db engine references to an isolated temp-file SQLite DB."""
    db_path = tmp_path / "test_dropvault.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False},
    )

    import dropvault.models  # noqa: F401 (register all ORM mappers)
    SQLModel.metadata.create_all(test_engine)

    blob_dir = tmp_path / "blobs"
    blob_dir.mkdir()

    monkeypatch.setattr("dropvault.infra.db.engine.engine", test_engine)
    monkeypatch.setattr("dropvault.infra.db.uow.engine", test_engine)
    monkeypatch.setattr("dropvault.storage.files.DATA_DIR", blob_dir)

    yield test_engine

    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def blob_dir(use_test_engine, tmp_path):
    return tmp_path / "blobs"


@pytest.fixture
def client(use_test_engine):
    """FastAPI TestClient backed by the isolated test engine."""
    from fastapi.testclient import TestClient
    from dropvault.api.app import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    """Sign up a user and return its bearer header."""
    def _make(email: str = "alice@example.com", password: str = "secret123") -> dict:
        resp = client.post("/auth/signup", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return _make


@pytest.fixture
def auth_headers(make_user) -> dict:
    return make_user()


@pytest.fixture
def manual():
    from dropvault.uploads.scheduler import ManualScheduler
    return ManualScheduler()


@pytest.fixture
def rng():
    return random.Random(1234)
