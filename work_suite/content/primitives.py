"""
Common primitives shared by the content model.

Identifiers, timestamps and the serialized form of item content.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..errors import ContentCorruptedError


def generate_id() -> str:
    """Generate an opaque unique id for items, tags, users and themes."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def advance_timestamp(previous: Optional[datetime]) -> datetime:
    """Return a timestamp strictly later than ``previous``.

    Two writes inside the same clock tick must still move ``updated_at``
    forward, so ties are broken by one microsecond.
    """
    now = utc_now()
    previous = as_utc(previous)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def isoformat(value: Optional[datetime]) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value else None


def dump_content(content: Any) -> Optional[str]:
    """Serialize an item payload for storage. ``None`` stays NULL."""
    if content is None:
        return None
    return json.dumps(content, ensure_ascii=False)


def load_content(raw: Optional[str], item_id: str) -> Any:
    """Parse a stored payload, raising ContentCorruptedError if it is not JSON."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ContentCorruptedError(item_id, str(e)) from e
