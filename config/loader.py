"""
Configuration loading for deferred-index-sync.

Merges defaults, an optional JSON settings file and environment
variable overrides into validated SyncSettings.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

from deferred_sync.models.config import SyncSettings
from .defaults import ENV_VAR_MAPPING, STRING_SETTINGS, get_default_settings

logger = logging.getLogger(__name__)


class ConfigurationLoader:
    """Load and cache sync settings"""

    def __init__(self):
        self.config_cache: Dict[str, SyncSettings] = {}

    def load_settings(self, config_file: Optional[Union[str, Path]] = None) -> SyncSettings:
        """
        Load settings from defaults, an optional JSON file and the environment.

        Args:
            config_file: Path to a JSON settings file

        Returns:
            Validated settings

        Raises:
            pydantic.ValidationError: If a merged value is invalid
        """
        cache_key = str(Path(config_file).resolve()) if config_file else "<defaults>"
        if cache_key in self.config_cache:
            return self.config_cache[cache_key]

        data = get_default_settings()

        if config_file:
            file_data = self._load_config_file(Path(config_file))
            data = self._merge(data, file_data)

        data = self._apply_env_overrides(data)

        settings = SyncSettings(**data)
        self.config_cache[cache_key] = settings
        return settings

    def _load_config_file(self, config_file: Path) -> Dict[str, Any]:
        """Load a JSON settings file, falling back to defaults if it is unusable"""
        if not config_file.exists():
            logger.info(f"No config file at {config_file}, using defaults")
            return {}

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load config from {config_file}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Config file {config_file} must contain a JSON object")
            return {}

        return data

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge override values into base"""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration"""
        for env_var, config_path in ENV_VAR_MAPPING.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                self._set_nested_value(config_data, config_path, env_value)

        return config_data

    def _set_nested_value(self, data: Dict[str, Any], path: str, value: str) -> None:
        """Set nested dictionary value using dot notation path"""
        keys = path.split('.')
        current = data

        for key in keys[:-1]:
            # A section nulled out by the config file is rebuilt from the override
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        final_key = keys[-1]
        if path in STRING_SETTINGS:
            current[final_key] = value
        else:
            current[final_key] = self._convert_env_value(value)

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type"""
        # Empty or explicit null disables optional settings such as the chunk limit
        if value.strip().lower() in ('', 'none', 'null'):
            return None

        # Boolean conversion
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        # Numeric conversion
        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        # Return as string
        return value

    def save_settings(self, settings: SyncSettings, config_file: Union[str, Path]) -> bool:
        """Save settings to a JSON file"""
        config_file = Path(config_file)
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(config_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)

            self.config_cache.pop(str(config_file.resolve()), None)
            logger.info(f"Saved configuration to {config_file}")
            return True

        except OSError as e:
            logger.error(f"Failed to save config to {config_file}: {e}")
            return False

    def clear_cache(self) -> None:
        """Clear configuration cache"""
        self.config_cache.clear()
