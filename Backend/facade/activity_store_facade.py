from __future__ import annotations

import os
from typing import Optional

from repositories.activity_repository import ActivityRepository
from repositories.local_system import LocalSystem
from repositories.sql_model_activity_repository import SqlModelActivityRepository
from services.external_sync_bridge import ExternalSyncBridge


# ===== Facade & Contracts =====

class ActivityStoreFacade:
    """Facade that hides which backend we use.
    Wires the activity repository, the local system and the sync bridge together.
    """
    def __init__(self, repo: ActivityRepository, local_system: Optional[LocalSystem] = None):
        self.repo = repo
        self.repo.init()
        self.local_system = local_system or LocalSystem()
        self.bridge = ExternalSyncBridge(self.repo, self.local_system)

    @staticmethod
    def from_env() -> "ActivityStoreFacade":
        """
        Select a backend via GAS_DB_BACKEND env var.
        Supported: 'sqlmodel' (default).
        """
        backend = os.getenv("GAS_DB_BACKEND", "sqlmodel").lower()
        if backend == "sqlmodel":
            return ActivityStoreFacade(SqlModelActivityRepository())
        raise ValueError(f"Unsupported backend: {backend}")

    def export_sessions_json(self) -> str:
        return self.bridge.export_sessions_json()

    def import_sessions_json(self, payload: Optional[str]) -> str:
        return self.bridge.import_sessions_json(payload)
