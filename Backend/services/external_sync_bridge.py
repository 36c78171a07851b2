# services/external_sync_bridge.py
from __future__ import annotations
import json
import logging
import os
import threading
from typing import Any, Iterable, List, Optional

from pydantic import TypeAdapter

from models.activity import Activity
from models.external_session import ExternalImportResult, ExternalSessionDto
from repositories.activity_repository import ActivityRepository
from repositories.local_system import LocalSystem
from services.configuration_resolver import ConfigurationResolver
from services.identifiers import (
    first_non_empty,
    parse_guid,
    parse_guid_or_default,
    parse_guids,
    to_utc,
)
from services.session_matcher import MatchOutcome, merge_session

logger = logging.getLogger(__name__)

DEFAULT_ACTION_NAME = os.getenv("GAS_DEFAULT_ACTION", "activity")
NOT_LOADED_ERROR = "Activity database is not loaded."

# Process-wide gate around every export and import traversal of the store.
# Not reentrant: never take it from code already running under it.
IMPORT_LOCK = threading.Lock()

_sessions_adapter = TypeAdapter(List[ExternalSessionDto])


def _decode_payload(payload: Optional[str]) -> List[Any]:
    """Split a payload into raw elements; anything that is not a JSON array is empty."""
    if not payload or not payload.strip():
        return []
    try:
        data = json.loads(payload)
    except ValueError:
        logger.warning("Ignoring malformed import payload (%d chars)", len(payload))
        return []
    return data if isinstance(data, list) else []


class ExternalSyncBridge:
    """Exports the local activity store as transfer records and merges external
    records back into it without duplicating sessions.
    """

    def __init__(
        self,
        repository: Optional[ActivityRepository],
        local_system: LocalSystem,
        resolver: Optional[ConfigurationResolver] = None,
        default_action_name: str = DEFAULT_ACTION_NAME,
    ):
        self.repository = repository
        self.local_system = local_system
        self.resolver = resolver or ConfigurationResolver(local_system)
        self.default_action_name = default_action_name

    def _is_loaded(self) -> bool:
        return self.repository is not None and bool(getattr(self.repository, "is_loaded", False))

    # ----------------- export -----------------
    def export_sessions_json(self) -> str:
        try:
            sessions = self.export_sessions()
            return _sessions_adapter.dump_json(sessions, by_alias=True).decode("utf-8")
        except Exception:
            # export never fails for the caller: "nothing" and "failed" both read as []
            logger.exception("Session export failed, returning an empty list")
            return "[]"

    def export_sessions(self) -> List[ExternalSessionDto]:
        if not self._is_loaded():
            return []

        with IMPORT_LOCK:
            result: List[ExternalSessionDto] = []
            configs = self.local_system.get_configurations()

            for game_activities in self.repository.list_game_activities() or []:
                game = game_activities.game if game_activities else None
                if game is None or first_non_empty(game.id) is None:
                    continue

                for activity in game_activities.items or []:
                    if activity is None or activity.date_session is None:
                        continue

                    config_name = None
                    if 0 <= activity.id_configuration < len(configs):
                        config_name = configs[activity.id_configuration].name

                    source_id = first_non_empty(activity.source_id, game.source_id)
                    platform_ids = first_non_empty(activity.platform_ids, game.platform_ids, default=[])
                    result.append(ExternalSessionDto(
                        game_id=str(game.id),
                        source_id=str(source_id) if source_id is not None else None,
                        platform_ids=[str(p) for p in platform_ids],
                        id_configuration=activity.id_configuration,
                        configuration_name=config_name,
                        game_action_name=activity.game_action_name,
                        date_session_utc=to_utc(activity.date_session),
                        elapsed_seconds=activity.elapsed_seconds,
                    ))

            return result

    # ----------------- import -----------------
    def import_sessions_json(self, payload: Optional[str]) -> str:
        result = ExternalImportResult()
        try:
            self.import_sessions(_decode_payload(payload), result)
        except Exception as e:
            logger.exception("Session import failed")
            result.record_error(str(e))
        return result.model_dump_json(by_alias=True)

    def import_sessions(
        self,
        sessions: Optional[Iterable[Any]],
        result: Optional[ExternalImportResult] = None,
    ) -> ExternalImportResult:
        """Merge transfer records (DTOs or raw dicts) into the store, in order.

        Every record lands in exactly one of applied/updated/skipped/errors.
        """
        result = result or ExternalImportResult()
        if not self._is_loaded():
            result.record_error(NOT_LOADED_ERROR)
            return result

        with IMPORT_LOCK:
            for raw in sessions or []:
                try:
                    outcome = self._import_one(raw)
                except Exception as e:
                    logger.warning("Session import error: %s", e)
                    result.record_error(str(e))
                    continue

                if outcome is MatchOutcome.APPLIED:
                    result.applied += 1
                elif outcome is MatchOutcome.UPDATED:
                    result.updated += 1
                else:
                    result.skipped += 1

        logger.info(
            "Imported sessions: applied=%d updated=%d skipped=%d errors=%d",
            result.applied, result.updated, result.skipped, result.errors,
        )
        return result

    def _import_one(self, raw: Any) -> MatchOutcome:
        session = raw if isinstance(raw, ExternalSessionDto) else ExternalSessionDto.model_validate(raw)

        game_id = parse_guid(session.game_id)
        if game_id is None:
            return MatchOutcome.SKIPPED

        game = self.repository.get_game(game_id)
        if game is None:
            return MatchOutcome.SKIPPED

        game_activities = self.repository.get(game)
        if game_activities is None:
            return MatchOutcome.SKIPPED

        date_session = to_utc(session.date_session_utc)
        action_name = session.game_action_name
        if not action_name or not action_name.strip():
            action_name = self.default_action_name

        candidate = Activity(
            id_configuration=self.resolver.resolve(session.configuration_name, session.id_configuration),
            game_action_name=action_name,
            date_session=date_session,
            source_id=parse_guid_or_default(session.source_id, game.source_id),
            platform_ids=parse_guids(session.platform_ids, game.platform_ids),
            elapsed_seconds=session.elapsed_seconds,
        )
        outcome = merge_session(game_activities.items, candidate)

        game_activities.items_details.setdefault(date_session, [])
        self.repository.update(game_activities)
        return outcome
