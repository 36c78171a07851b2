# models/external_session.py
from __future__ import annotations
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExternalSessionDto(BaseModel):
    """Transfer record for one play session, as exchanged with the external source."""
    model_config = ConfigDict(populate_by_name=True)

    game_id: Optional[str] = Field(None, alias="GameId")
    source_id: Optional[str] = Field(None, alias="SourceId")
    # entries are parsed one by one later, bad ones are dropped there
    platform_ids: Optional[List[Any]] = Field(default_factory=list, alias="PlatformIds")
    id_configuration: int = Field(-1, alias="IdConfiguration")
    configuration_name: Optional[str] = Field(None, alias="ConfigurationName")
    game_action_name: Optional[str] = Field(None, alias="GameActionName")
    date_session_utc: datetime = Field(..., alias="DateSessionUtc")
    elapsed_seconds: int = Field(0, ge=0, alias="ElapsedSeconds")

    @field_validator("game_id", "source_id", mode="before")
    @classmethod
    def _identifier_text(cls, value: Any) -> Optional[str]:
        # anything that is not text can't be an identifier: treat it as missing
        return value if isinstance(value, str) else None


class ExternalImportResult(BaseModel):
    """Outcome of one import call. `error` only keeps the last failure message."""
    model_config = ConfigDict(populate_by_name=True)

    applied: int = Field(0, alias="Applied")
    updated: int = Field(0, alias="Updated")
    skipped: int = Field(0, alias="Skipped")
    errors: int = Field(0, alias="Errors")
    error: Optional[str] = Field(None, alias="Error")

    def record_error(self, message: str) -> None:
        self.errors += 1
        self.error = message
