# models/activity.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID


# ---------------------------
# Host catalog (read-only)
# ---------------------------

@dataclass
class Game:
    id: UUID
    name: Optional[str] = None
    source_id: Optional[UUID] = None
    platform_ids: List[UUID] = field(default_factory=list)


# ---------------------------
# Activity store
# ---------------------------

@dataclass
class Activity:
    """One play session of a game. `id` stays None until the row is persisted."""
    id_configuration: int = 0
    game_action_name: Optional[str] = None
    date_session: Optional[datetime] = None
    source_id: Optional[UUID] = None
    platform_ids: Optional[List[UUID]] = None
    elapsed_seconds: int = 0
    id: Optional[int] = None


@dataclass
class ActivityDetailsData:
    datelog: Optional[datetime] = None
    fps: int = 0
    cpu: int = 0
    gpu: int = 0
    ram: int = 0
    cpu_temp: int = 0
    gpu_temp: int = 0


@dataclass
class GameActivities:
    game: Game
    items: List[Activity] = field(default_factory=list)
    # secondary table: session timestamp -> sampled details of that session
    items_details: Dict[datetime, List[ActivityDetailsData]] = field(default_factory=dict)
