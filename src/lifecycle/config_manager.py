"""
Config Manager

Loads LifecycleSettings from a YAML file and applies environment overrides.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from lifecycle.models.enums import LogCategory
from lifecycle.models.settings import LifecycleSettings
from lifecycle.utils import get_category_logger

log = get_category_logger(LogCategory.CONFIG)

CONFIG_ENV_VAR = "LIFECYCLE_CONFIG"
DEBUG_ENV_VAR = "DEBUG"


class ConfigManager:
    """
    Settings loader with factory-default fallback

    The YAML file may either hold the settings at top level or under a
    ``lifecycle:`` section, so the controller can share a file with the rest
    of an application's configuration.

    Example:
        config = ConfigManager("config/app.yaml")
        settings = config.load()

        settings.start_mode        # StartMode.SEQUENTIAL
        settings.rollback_scope    # RollbackScope.PENDING
    """

    SECTION = "lifecycle"

    def __init__(self, config_path: Union[str, Path, None] = None):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to a YAML file; falls back to $LIFECYCLE_CONFIG, then to defaults
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR) or None
        self.config_path: Optional[Path] = Path(config_path) if config_path else None
        self.data: Dict[str, Any] = {}

    def load(self) -> LifecycleSettings:
        """
        Load settings

        Process:
        1. Read YAML (if a path is configured)
        2. Pick the ``lifecycle:`` section when present
        3. Validate through LifecycleSettings
        4. Fall back to defaults on any read/validation failure
        5. Apply $DEBUG override

        Returns:
            Validated, frozen LifecycleSettings
        """
        settings = LifecycleSettings()

        if self.config_path is not None:
            try:
                self.data = self._read_yaml(self.config_path)
                settings = LifecycleSettings.model_validate(self.data)
                log.debug("Loaded lifecycle settings", path=str(self.config_path))
            except (OSError, yaml.YAMLError, ValidationError, TypeError) as ex:
                log.error(
                    "Failed to load lifecycle settings",
                    path=str(self.config_path),
                    error=str(ex),
                    error_type=type(ex).__name__,
                )
                log.warn("Falling back to default lifecycle settings")
                self.data = {}
                settings = LifecycleSettings()

        return self._apply_env(settings)

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise TypeError(f"Expected a mapping in {path}, got {type(raw).__name__}")

        section = raw.get(self.SECTION, raw)
        if not isinstance(section, dict):
            raise TypeError(f"Expected '{self.SECTION}' to be a mapping, got {type(section).__name__}")
        return section

    @staticmethod
    def _apply_env(settings: LifecycleSettings) -> LifecycleSettings:
        if os.environ.get(DEBUG_ENV_VAR):
            return settings.model_copy(update={"log_level": "DEBUG"})
        return settings


def load_settings(config_path: Union[str, Path, None] = None) -> LifecycleSettings:
    """Shortcut for ConfigManager(config_path).load()."""
    return ConfigManager(config_path).load()
