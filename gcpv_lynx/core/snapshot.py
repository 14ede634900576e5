from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional, Sequence

from .emitter import RaceRecord, render_json
from .utils import utc_now_iso


@dataclass(frozen=True)
class Snapshot:
    competition_id: int
    generated_at_utc: str
    records: tuple[RaceRecord, ...]
    body: bytes

    @property
    def race_count(self) -> int:
        return len(self.records)

    @property
    def lane_count(self) -> int:
        return sum(len(record.lanes) for record in self.records)


def build_snapshot(competition_id: int, records: Sequence[RaceRecord]) -> Snapshot:
    frozen = tuple(records)
    return Snapshot(
        competition_id=competition_id,
        generated_at_utc=utc_now_iso(),
        records=frozen,
        body=render_json(frozen, pretty=False).encode("utf-8"),
    )


EMPTY_BODY = b"[]"


class SnapshotStore:
    """Holds the last fully built snapshot.

    Readers call ``current()`` without locking; the writer swaps the reference in
    one assignment, so a reader sees either the old or the new snapshot.
    """

    def __init__(self) -> None:
        self._current: Optional[Snapshot] = None
        self._write_lock = threading.Lock()

    def current(self) -> Optional[Snapshot]:
        return self._current

    def body(self) -> bytes:
        snapshot = self._current
        return snapshot.body if snapshot is not None else EMPTY_BODY

    def publish(self, snapshot: Snapshot) -> None:
        with self._write_lock:
            self._current = snapshot
