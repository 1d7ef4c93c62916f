# src/sortviz/storage/jsonl.py
from __future__ import annotations

import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, BinaryIO, Iterator

import orjson

from sortviz.core.events.base import Event


class JsonlEventStore:
    """
    Append-only JSONL trace of a session's events.

    - one event per line, keys sorted
    - lines land in publish order, so `sequence` is increasing down the file
    - fsync per line only when asked; close() always flushes

    Renderers can replay a session offline from the trace.
    """

    def __init__(self, *, path: Path, fsync: bool = False) -> None:
        self._path = path
        self._fsync = fsync
        self._fh: BinaryIO | None = None

        self._path.parent.mkdir(parents=True, exist_ok=True)

    def open(self) -> None:
        if self._fh is None:
            self._fh = self._path.open("ab")

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.flush()
            if self._fsync:
                os.fsync(self._fh.fileno())
        finally:
            self._fh.close()
            self._fh = None

    def append(self, event: Event) -> None:
        self.open()
        assert self._fh is not None

        self._fh.write(orjson.dumps(event_to_dict(event), option=orjson.OPT_SORT_KEYS | orjson.OPT_APPEND_NEWLINE))
        self._fh.flush()
        if self._fsync:
            os.fsync(self._fh.fileno())

    def read_events(self) -> Iterator[dict[str, Any]]:
        """
        Stream the trace back as dicts, skipping blank lines.
        """
        if not self._path.exists():
            return
        with self._path.open("rb") as fh:
            for line in fh:
                if line.strip():
                    yield orjson.loads(line)

    def iter_events(self) -> list[dict[str, Any]]:
        return list(self.read_events())


def event_to_dict(event: Event) -> dict[str, Any]:
    """
    Plain-JSON view of an event, as stored in traces and served to pollers.

    UUID and datetime become strings, tuples become lists, and the
    event_type ClassVar is included.
    """
    d = asdict(event)
    d["event_id"] = str(event.event_id)
    d["timestamp_utc"] = event.timestamp_utc.isoformat()
    for k, v in d.items():
        if isinstance(v, tuple):
            d[k] = list(v)
    d["event_type"] = event.event_type
    return d
