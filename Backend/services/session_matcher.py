# services/session_matcher.py
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from models.activity import Activity


class MatchOutcome(str, Enum):
    APPLIED = "applied"
    UPDATED = "updated"
    SKIPPED = "skipped"


def find_match(
    items: Iterable[Activity],
    date_session: datetime,
    id_configuration: int,
    action_name: str,
) -> Optional[Activity]:
    """First record sharing (timestamp, configuration index, action name).
    Action names are compared case-sensitively.
    """
    for item in items:
        if item is None or item.date_session is None:
            continue
        if (
            item.date_session == date_session
            and item.id_configuration == id_configuration
            and (item.game_action_name or "") == action_name
        ):
            return item
    return None


def merge_session(items: List[Activity], candidate: Activity) -> MatchOutcome:
    existing = find_match(
        items,
        candidate.date_session,
        candidate.id_configuration,
        candidate.game_action_name or "",
    )
    if existing is None:
        items.append(candidate)
        return MatchOutcome.APPLIED

    # only elapsed time may grow between two reports of the same session; a tie is not an update
    if candidate.elapsed_seconds > existing.elapsed_seconds:
        existing.elapsed_seconds = candidate.elapsed_seconds
        return MatchOutcome.UPDATED

    return MatchOutcome.SKIPPED
