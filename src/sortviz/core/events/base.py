from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True, kw_only=True)
class Event:
    """
    Base class for every event published on the EventBus.

    - event_id / timestamp_utc: identity + wall clock of emission
    - sequence: monotonic per-session ordering (feeds poll by it)

    Subclasses declare a ClassVar event_type and their payload fields.
    """

    event_type: ClassVar[str] = "event"

    sequence: int
    event_id: UUID = field(default_factory=uuid4)
    timestamp_utc: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, *, sequence: int, **payload: Any) -> "Event":
        return cls(sequence=sequence, **payload)
