"""In-memory upload session: tracked entries, simulated progress, ready events.

Per-entry lifecycle::

    uploading --(progress >= 100)--> completing --(delay)--> complete
    uploading | completing --(dismiss)--> removed

"completing" is not a separate status: it is ``uploading`` with progress
clamped at 100 while the completion callback is pending.

Each name holds at most one pending timer (the next tick or the completion).
Callbacks also check that the entry they were scheduled for is still the
registered one, so a replaced or dismissed entry is never mutated again.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from dropvault.uploads.gate import (
    MAX_UPLOAD_BYTES,
    CandidateFile,
    Partition,
    Rejection,
    partition,
)
from dropvault.uploads.scheduler import Cancellable, Scheduler

logger = logging.getLogger(__name__)


class EntryStatus(str, Enum):
    UPLOADING = "uploading"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class TrackedEntry:
    name: str
    size_bytes: int
    mime_type: str
    progress: float = 0.0
    status: EntryStatus = EntryStatus.UPLOADING
    error_message: str | None = None


@dataclass(frozen=True)
class FileReady:
    name: str
    size_bytes: int
    mime_type: str


ReadyListener = Callable[[FileReady], None]
ChangeListener = Callable[[str], None]


class UploadSession:
    def __init__(
        self,
        scheduler: Scheduler,
        *,
        tick_interval: float = 0.3,
        completion_delay: float = 0.5,
        max_increment: float = 10.0,
        max_bytes: int = MAX_UPLOAD_BYTES,
        rng: random.Random | None = None,
    ) -> None:
        if tick_interval <= 0:
            raise ValueError("tick_interval must be > 0")
        if max_increment <= 0:
            raise ValueError("max_increment must be > 0")
        self._scheduler = scheduler
        self._tick_interval = tick_interval
        self._completion_delay = completion_delay
        self._max_increment = max_increment
        self._max_bytes = max_bytes
        self._rng = rng or random.Random()

        self._entries: dict[str, TrackedEntry] = {}
        self._timers: dict[str, Cancellable] = {}
        self._ready_listeners: list[ReadyListener] = []
        self._change_listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def entries(self) -> list[TrackedEntry]:
        return list(self._entries.values())

    def get(self, name: str) -> TrackedEntry | None:
        return self._entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def is_completing(self, name: str) -> bool:
        entry = self._entries.get(name)
        return (
            entry is not None
            and entry.status is EntryStatus.UPLOADING
            and entry.progress >= 100.0
        )

    def has_pending(self) -> bool:
        """True while any entry still has a tick or completion outstanding."""
        return bool(self._timers)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on_file_ready(self, listener: ReadyListener) -> Callable[[], None]:
        self._ready_listeners.append(listener)
        return lambda: self._remove(self._ready_listeners, listener)

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        self._change_listeners.append(listener)
        return lambda: self._remove(self._change_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def ingest(self, candidates: Iterable[CandidateFile]) -> Partition:
        """Gate a batch, record its rejections, then admit what passed."""
        result = partition(candidates, self._max_bytes)
        for rejection in result.rejected:
            self.reject(rejection)
        for candidate in result.accepted:
            self.admit(candidate)
        return result

    def admit(self, candidate: CandidateFile) -> TrackedEntry:
        self._cancel_timer(candidate.name)
        entry = TrackedEntry(
            name=candidate.name,
            size_bytes=candidate.size_bytes,
            mime_type=candidate.mime_type,
        )
        self._entries[entry.name] = entry
        logger.debug("Admitted %s (%d bytes)", entry.name, entry.size_bytes)
        self._schedule(entry, self._tick_interval, self._tick)
        self._notify_change(entry.name)
        return entry

    def reject(self, rejection: Rejection) -> TrackedEntry:
        candidate = rejection.candidate
        self._cancel_timer(candidate.name)
        entry = TrackedEntry(
            name=candidate.name,
            size_bytes=candidate.size_bytes,
            mime_type=candidate.mime_type,
            status=EntryStatus.ERROR,
            error_message=rejection.message,
        )
        self._entries[entry.name] = entry
        logger.info("Rejected %s: %s", entry.name, rejection.message)
        self._notify_change(entry.name)
        return entry

    def dismiss(self, name: str) -> bool:
        """Drop *name* and cancel its pending timer. Returns False if absent."""
        self._cancel_timer(name)
        entry = self._entries.pop(name, None)
        if entry is None:
            return False
        logger.debug("Dismissed %s (status=%s)", name, entry.status.value)
        self._notify_change(name)
        return True

    def reset(self) -> None:
        """Cancel every timer and drop every entry, notifying each removed name."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        names = list(self._entries)
        self._entries.clear()
        for name in names:
            self._notify_change(name)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _schedule(
        self,
        entry: TrackedEntry,
        delay: float,
        step: Callable[[TrackedEntry], None],
    ) -> None:
        self._timers[entry.name] = self._scheduler.call_later(delay, lambda: step(entry))

    def _cancel_timer(self, name: str) -> None:
        handle = self._timers.pop(name, None)
        if handle is not None:
            handle.cancel()

    def _is_current(self, entry: TrackedEntry) -> bool:
        return self._entries.get(entry.name) is entry

    def _increment(self) -> float:
        # random() is in [0, 1), so this lands in (0, max_increment]
        return self._max_increment * (1.0 - self._rng.random())

    def _tick(self, entry: TrackedEntry) -> None:
        if not self._is_current(entry):
            return
        self._timers.pop(entry.name, None)
        entry.progress = min(100.0, entry.progress + self._increment())
        if entry.progress >= 100.0:
            self._schedule(entry, self._completion_delay, self._complete)
        else:
            self._schedule(entry, self._tick_interval, self._tick)
        self._notify_change(entry.name)

    def _complete(self, entry: TrackedEntry) -> None:
        if not self._is_current(entry):
            return
        self._timers.pop(entry.name, None)
        entry.progress = 100.0
        entry.status = EntryStatus.COMPLETE
        logger.info("Upload complete: %s", entry.name)
        self._notify_change(entry.name)

        event = FileReady(entry.name, entry.size_bytes, entry.mime_type)
        for listener in list(self._ready_listeners):
            # a listener may have dismissed or replaced the entry
            if not self._is_current(entry):
                return
            try:
                listener(event)
            except Exception:
                logger.exception("File-ready listener failed for %s", entry.name)

    def _notify_change(self, name: str) -> None:
        for listener in list(self._change_listeners):
            try:
                listener(name)
            except Exception:
                logger.exception("Change listener failed for %s", name)
