"""Blob storage on the local data directory: ``files/<owner_id>/<uuid>_<name>``."""
from __future__ import annotations

import hashlib
import re
import uuid
from pathlib import Path

from dropvault.db import DATA_DIR

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(name: str) -> str:
    return _UNSAFE.sub("_", name)


def compute_sha256(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def blob_path(owner_id: int, name: str) -> str:
    """Fresh relative path (POSIX) under DATA_DIR; never reused across writes."""
    return f"files/{owner_id}/{uuid.uuid4().hex}_{sanitize_filename(name)}"


def write_blob(rel_path: str, content: bytes) -> Path:
    target = DATA_DIR / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target


def read_blob(rel_path: str) -> bytes:
    return (DATA_DIR / rel_path).read_bytes()


def delete_blob(rel_path: str) -> bool:
    """Remove the blob; returns False if it was already gone."""
    target = DATA_DIR / rel_path
    if not target.exists():
        return False
    target.unlink()
    return True
