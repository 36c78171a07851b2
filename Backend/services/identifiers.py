# services/identifiers.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional
from uuid import UUID

NIL_UUID = UUID(int=0)


def _is_empty(value: Any) -> bool:
    if value is None or value == NIL_UUID:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def first_non_empty(*candidates: Any, default: Any = None) -> Any:
    """Return the first candidate that is not None, nil, blank or an empty collection."""
    for candidate in candidates:
        if not _is_empty(candidate):
            return candidate
    return default


def parse_guid(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def parse_guid_or_default(value: Any, fallback: Optional[UUID]) -> Optional[UUID]:
    return first_non_empty(parse_guid(value), fallback)


def parse_guids(values: Optional[Iterable[Any]], fallback: Optional[Iterable[UUID]]) -> List[UUID]:
    """Parse every entry, dropping the ones that are not identifiers.
    An empty result falls back to a copy of `fallback`.
    """
    parsed = [g for g in (parse_guid(v) for v in (values or [])) if g is not None]
    return first_non_empty(parsed, default=None) or list(fallback or [])


def to_utc(value: datetime) -> datetime:
    # naive timestamps are taken as already being UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
