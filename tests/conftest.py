"""Shared fixtures: an in-memory activity store seeded with one game."""

from uuid import UUID

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from models.activity import Game
from repositories.local_system import LocalSystem
from repositories.sql_model_activity_repository import SqlModelActivityRepository
from services.external_sync_bridge import ExternalSyncBridge

GAME_ID = UUID("6f1c2a3e-8d4b-4f5a-9c7e-1a2b3c4d5e6f")
SOURCE_ID = UUID("11111111-2222-3333-4444-555555555555")
PLATFORM_ID = UUID("aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee")


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    SQLModel.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def game():
    return Game(id=GAME_ID, name="Test Game", source_id=SOURCE_ID, platform_ids=[PLATFORM_ID])


@pytest.fixture
def repository(engine, game):
    repo = SqlModelActivityRepository(engine)
    repo.init()
    repo.upsert_games([game])
    return repo


@pytest.fixture
def local_system(tmp_path):
    return LocalSystem(user_data_path=str(tmp_path / "GameActivity"), id_configuration=0)


@pytest.fixture
def bridge(repository, local_system):
    return ExternalSyncBridge(repository, local_system, default_action_name="activity")
