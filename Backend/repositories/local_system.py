# repositories/local_system.py
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from models.system_configuration import SystemConfiguration

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
USER_DATA_PATH = os.getenv("GAS_USER_DATA_PATH", str(BASE_DIR / "database" / "GameActivity"))
ID_CONFIGURATION = int(os.getenv("GAS_ID_CONFIGURATION", "0"))
CONFIGURATIONS_FILE = "Configurations.json"

_configs_adapter = TypeAdapter(List[SystemConfiguration])


def encode_configurations(configs: List[SystemConfiguration]) -> str:
    return _configs_adapter.dump_json(configs, by_alias=True).decode("utf-8")


def write_configurations(path: Path, configs: List[SystemConfiguration]) -> None:
    """Overwrite `path` with the whole encoded list. Raises OSError on failure."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_configurations(configs), encoding="utf-8")


def read_configurations(path: Path) -> List[SystemConfiguration]:
    path = Path(path)
    if not path.exists():
        return []
    try:
        return _configs_adapter.validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.warning("Ignoring unreadable configurations file %s: %s", path, e)
        return []


class LocalSystem:
    """Holds the shared, append-only configuration list and the default configuration index.

    The list returned by get_configurations() is the live one: callers append to it
    and positions are never reused or reordered.
    """

    def __init__(self, user_data_path: Optional[str] = None, id_configuration: Optional[int] = None):
        self.user_data_path = Path(user_data_path or USER_DATA_PATH)
        self._id_configuration = ID_CONFIGURATION if id_configuration is None else id_configuration
        self._configurations = read_configurations(self.configurations_path)

    @property
    def configurations_path(self) -> Path:
        return self.user_data_path / CONFIGURATIONS_FILE

    def get_configurations(self) -> List[SystemConfiguration]:
        return self._configurations

    def get_id_configuration(self) -> int:
        return self._id_configuration
