"""Size-policy gate applied to a batch of candidate files before admission.

Pure: returns a partition, touches nothing else.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

_MIB = 1024 * 1024
MAX_UPLOAD_BYTES = 10 * _MIB
SIZE_LIMIT_MESSAGE = "File exceeds 10MB limit"


@dataclass(frozen=True)
class CandidateFile:
    name: str
    size_bytes: int
    mime_type: str = "application/octet-stream"

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError(f"size_bytes must be >= 0, got {self.size_bytes}")


@dataclass(frozen=True)
class Rejection:
    candidate: CandidateFile
    message: str = SIZE_LIMIT_MESSAGE
    kind: str = "SizeLimitExceeded"

    @property
    def name(self) -> str:
        return self.candidate.name


@dataclass
class Partition:
    accepted: list[CandidateFile] = field(default_factory=list)
    rejected: list[Rejection] = field(default_factory=list)


def limit_message(max_bytes: int) -> str:
    if max_bytes == MAX_UPLOAD_BYTES:
        return SIZE_LIMIT_MESSAGE
    return f"File exceeds {max_bytes / _MIB:g}MB limit"


def partition(
    candidates: Iterable[CandidateFile],
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> Partition:
    """Split *candidates* into accepted (``size <= max_bytes``) and rejected.

    Batch order is kept in both lists; duplicate names are not collapsed here.
    """
    result = Partition()
    message = limit_message(max_bytes)
    for candidate in candidates:
        if candidate.size_bytes > max_bytes:
            result.rejected.append(Rejection(candidate, message))
        else:
            result.accepted.append(candidate)
    return result
