"""Client-side upload flow: size gate, deferred-task scheduler, session tracker."""
from dropvault.uploads.gate import (
    MAX_UPLOAD_BYTES,
    SIZE_LIMIT_MESSAGE,
    CandidateFile,
    Partition,
    Rejection,
    partition,
)
from dropvault.uploads.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from dropvault.uploads.tracker import EntryStatus, FileReady, TrackedEntry, UploadSession

__all__ = [
    "MAX_UPLOAD_BYTES",
    "SIZE_LIMIT_MESSAGE",
    "CandidateFile",
    "Partition",
    "Rejection",
    "partition",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "EntryStatus",
    "FileReady",
    "TrackedEntry",
    "UploadSession",
]
