from __future__ import annotations

import re
import secrets
from datetime import datetime, timezone

_RUN_ID_RE = re.compile(r"^\d{8}T\d{6}Z_[0-9a-f]{8}$")


def new_run_id(now: datetime | None = None) -> str:
    """
    Timestamp plus a high-entropy suffix, unique even within one second.

    e.g. 20261019T101500Z_ab12cd34
    """
    created_at = now or datetime.now(timezone.utc)
    timestamp = created_at.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{timestamp}_{secrets.token_hex(4)}"


def is_run_id(value: str) -> bool:
    return bool(_RUN_ID_RE.match(value))
