import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import JSON, Column, Engine
from sqlmodel import SQLModel, Field, Session, select
from sqlmodel import create_engine

from models.activity import Activity, ActivityDetailsData, Game, GameActivities
from services.identifiers import parse_guid

# ===== Default SQLite / SQLModel Backend =====
BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DB_PATH = BASE_DIR / "database" / "activity.db"
DB_PATH = Path(os.getenv("GAS_DB_PATH", str(DEFAULT_DB_PATH)))
_engine = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})


class GameRow(SQLModel, table=True):
    """Host catalog entry. Read-only for the sync code, seeded through upsert_games()."""
    id: str = Field(primary_key=True)
    name: Optional[str] = None
    source_id: Optional[str] = None
    platform_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))


class ActivityRow(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: str = Field(foreign_key="gamerow.id", index=True)
    id_configuration: int = 0
    game_action_name: Optional[str] = None
    date_session: Optional[datetime] = Field(default=None, index=True)
    source_id: Optional[str] = None
    platform_ids: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    elapsed_seconds: int = 0


class ActivityDetailsRow(SQLModel, table=True):
    """Sampled details of one session, keyed by (game, session timestamp)."""
    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: str = Field(foreign_key="gamerow.id", index=True)
    date_session: datetime = Field(index=True)
    items: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))


# SQLite keeps no offset: timestamps go in as naive UTC and come back UTC-aware.
def _to_db_time(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None)


def _from_db_time(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


def _guid_str(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value is not None else None


def _game_from_row(row: GameRow) -> Game:
    return Game(
        id=UUID(row.id),
        name=row.name,
        source_id=parse_guid(row.source_id),
        platform_ids=[g for g in (parse_guid(p) for p in (row.platform_ids or [])) if g is not None],
    )


def _activity_from_row(row: ActivityRow) -> Activity:
    platform_ids = None
    if row.platform_ids is not None:
        platform_ids = [g for g in (parse_guid(p) for p in row.platform_ids) if g is not None]
    return Activity(
        id=row.id,
        id_configuration=row.id_configuration,
        game_action_name=row.game_action_name,
        date_session=_from_db_time(row.date_session),
        source_id=parse_guid(row.source_id),
        platform_ids=platform_ids,
        elapsed_seconds=row.elapsed_seconds,
    )


def _fill_activity_row(row: ActivityRow, activity: Activity) -> None:
    row.id_configuration = activity.id_configuration
    row.game_action_name = activity.game_action_name
    row.date_session = _to_db_time(activity.date_session)
    row.source_id = _guid_str(activity.source_id)
    row.platform_ids = None if activity.platform_ids is None else [str(p) for p in activity.platform_ids]
    row.elapsed_seconds = int(activity.elapsed_seconds)


def _details_to_json(data: ActivityDetailsData) -> Dict[str, Any]:
    return {
        "datelog": data.datelog.isoformat() if data.datelog else None,
        "fps": data.fps,
        "cpu": data.cpu,
        "gpu": data.gpu,
        "ram": data.ram,
        "cpu_temp": data.cpu_temp,
        "gpu_temp": data.gpu_temp,
    }


def _details_from_json(raw: Dict[str, Any]) -> ActivityDetailsData:
    datelog = raw.get("datelog")
    return ActivityDetailsData(
        datelog=datetime.fromisoformat(datelog) if datelog else None,
        fps=int(raw.get("fps") or 0),
        cpu=int(raw.get("cpu") or 0),
        gpu=int(raw.get("gpu") or 0),
        ram=int(raw.get("ram") or 0),
        cpu_temp=int(raw.get("cpu_temp") or 0),
        gpu_temp=int(raw.get("gpu_temp") or 0),
    )


class SqlModelActivityRepository:
    """Concrete repository backed by SQLite via SQLModel."""
    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine or _engine
        self.is_loaded = False

    def init(self) -> None:
        if self._engine is _engine:
            DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        SQLModel.metadata.create_all(self._engine)
        self.is_loaded = True

    def _session(self) -> Session:
        return Session(self._engine)

    # ----------------- catalog -----------------
    def get_game(self, game_id: UUID) -> Optional[Game]:
        with self._session() as session:
            row = session.get(GameRow, str(game_id))
            return _game_from_row(row) if row else None

    def upsert_games(self, games: List[Game]) -> Tuple[int, int]:
        inserted, skipped = 0, 0
        with self._session() as session:
            for g in games:
                if session.get(GameRow, str(g.id)) is not None:
                    skipped += 1
                    continue
                session.add(GameRow(
                    id=str(g.id),
                    name=g.name,
                    source_id=_guid_str(g.source_id),
                    platform_ids=[str(p) for p in g.platform_ids or []],
                ))
                inserted += 1
            session.commit()
        return inserted, skipped

    # ----------------- activities -----------------
    def _load(self, session: Session, game: Game) -> GameActivities:
        game_id = str(game.id)
        rows = session.exec(
            select(ActivityRow).where(ActivityRow.game_id == game_id).order_by(ActivityRow.id)
        ).all()
        details = session.exec(
            select(ActivityDetailsRow).where(ActivityDetailsRow.game_id == game_id)
        ).all()
        return GameActivities(
            game=game,
            items=[_activity_from_row(r) for r in rows],
            items_details={
                _from_db_time(d.date_session): [_details_from_json(x) for x in d.items or []]
                for d in details
            },
        )

    def get(self, game: Game) -> Optional[GameActivities]:
        """Activity collection of a game; an empty one when nothing was stored yet."""
        if game is None:
            return None
        with self._session() as session:
            return self._load(session, game)

    def list_game_activities(self) -> List[GameActivities]:
        with self._session() as session:
            games = session.exec(select(GameRow).order_by(GameRow.id)).all()
            return [self._load(session, _game_from_row(g)) for g in games]

    def update(self, game_activities: GameActivities) -> None:
        """Persist a (possibly mutated) collection: new activities are inserted and
        get their row id back, known ones are rewritten, details are upserted per timestamp.
        """
        game_id = str(game_activities.game.id)
        with self._session() as session:
            pending: List[Tuple[Activity, ActivityRow]] = []
            for activity in game_activities.items:
                row = session.get(ActivityRow, activity.id) if activity.id is not None else None
                if row is None:
                    row = ActivityRow(game_id=game_id)
                _fill_activity_row(row, activity)
                session.add(row)
                pending.append((activity, row))

            stored = {
                d.date_session: d
                for d in session.exec(
                    select(ActivityDetailsRow).where(ActivityDetailsRow.game_id == game_id)
                ).all()
            }
            for date_session, details in game_activities.items_details.items():
                key = _to_db_time(date_session)
                items = [_details_to_json(d) for d in details]
                row = stored.get(key)
                if row is None:
                    session.add(ActivityDetailsRow(game_id=game_id, date_session=key, items=items))
                elif row.items != items:
                    row.items = items
                    session.add(row)

            session.commit()
            for activity, row in pending:
                activity.id = row.id
