from typing import Iterable, List, Optional, Protocol, Tuple
from uuid import UUID

from models.activity import Game, GameActivities


class ActivityRepository(Protocol):
    """Persistence-agnostic contract for the game catalog and its activity collections."""
    is_loaded: bool

    def init(self) -> None:
        ...

    def get_game(self, game_id: UUID) -> Optional[Game]:
        ...

    def upsert_games(self, games: List[Game]) -> Tuple[int, int]:
        ...

    def get(self, game: Game) -> Optional[GameActivities]:
        ...

    def list_game_activities(self) -> Iterable[GameActivities]:
        ...

    def update(self, game_activities: GameActivities) -> None:
        ...
