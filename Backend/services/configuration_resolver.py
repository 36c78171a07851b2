# services/configuration_resolver.py
from __future__ import annotations
import logging
from typing import Optional

from models.system_configuration import SystemConfiguration
from repositories.local_system import LocalSystem, write_configurations

logger = logging.getLogger(__name__)


class ConfigurationResolver:
    """Maps a configuration name to its index in the shared configuration list,
    appending (and persisting) the name when it has not been seen yet.
    """

    def __init__(self, local_system: LocalSystem):
        self.local_system = local_system

    def resolve(self, name: Optional[str], fallback_index: int) -> int:
        configs = self.local_system.get_configurations()

        if name and name.strip():
            trimmed = name.strip()
            wanted = trimmed.lower()
            for index, config in enumerate(configs):
                if config is not None and (config.name or "").lower() == wanted:
                    return index

            configs.append(SystemConfiguration(name=trimmed))
            self.save()
            return len(configs) - 1

        if 0 <= fallback_index < len(configs):
            return fallback_index

        return max(0, self.local_system.get_id_configuration())

    def save(self) -> bool:
        """Persist the whole list to the side file.

        Best-effort: a failed write is logged and reported as False, never raised.
        The in-memory list keeps the new entry either way.
        """
        path = self.local_system.configurations_path
        try:
            write_configurations(path, self.local_system.get_configurations())
        except (OSError, ValueError) as e:
            logger.warning("Could not save configurations to %s: %s", path, e)
            return False
        return True
