"""
Configuration Manager - JSON-based settings and provider configuration.

This module provides centralized configuration management for anisource,
handling resolver defaults, provider settings and logging preferences with
validation, atomic writes and recovery from corrupted files.
"""

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from anisource.core.config_defaults import get_default_settings, get_default_sources
from anisource.core.config_schemas import AppSettings, SourcesConfig, SourceConfig
from anisource.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class ConfigManager:
    """
    Manages application configuration with JSON persistence and validation.

    Provides thread-safe access to configuration data with automatic
    validation and default value management.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to './config' if not specified.
        """
        self.config_dir = Path(config_dir or "config")
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Cannot create configuration directory: {e}", str(self.config_dir))

        self._settings_file = self.config_dir / "settings.json"
        self._sources_file = self.config_dir / "sources.json"

        self._lock = Lock()
        self._settings: Optional[AppSettings] = None
        self._sources: Optional[SourcesConfig] = None

        self._load_configurations()

    def _load_configurations(self) -> None:
        """Load all configuration files with error handling."""
        try:
            self._settings = self._load_file(self._settings_file, AppSettings, get_default_settings)
            self._sources = self._load_file(self._sources_file, SourcesConfig, get_default_sources)
            logger.debug("Configuration loaded successfully")
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}", str(self.config_dir))

    def _load_file(self, path: Path, model: Type[M], default_factory) -> M:
        """Load and validate one configuration file, recreating it if needed."""
        if not path.exists():
            logger.info(f"{path.name} not found, creating default configuration")
            data = default_factory()
            self._save(path, data)
            return data

        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            return model.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid {path.name}, using defaults: {e}")
            backup_path = path.with_suffix('.json.backup')
            path.replace(backup_path)
            logger.info(f"Corrupted configuration backed up to {backup_path}")

            data = default_factory()
            self._save(path, data)
            return data

    def _save(self, path: Path, data: BaseModel) -> None:
        """Save a model to file with atomic write."""
        temp_file = path.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data.model_dump(mode='json'), f, indent=2, ensure_ascii=False)
            temp_file.replace(path)
            logger.debug(f"{path.name} saved successfully")
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(f"Failed to save {path.name}: {e}", str(path))

    @property
    def settings(self) -> AppSettings:
        """Get current application settings (thread-safe)."""
        with self._lock:
            if self._settings is None:
                self._settings = self._load_file(self._settings_file, AppSettings, get_default_settings)
            return self._settings

    @property
    def sources(self) -> SourcesConfig:
        """Get current sources configuration (thread-safe)."""
        with self._lock:
            if self._sources is None:
                self._sources = self._load_file(self._sources_file, SourcesConfig, get_default_sources)
            return self._sources

    def update_setting(self, key_path: str, value: Any) -> None:
        """
        Update a specific setting using dot notation.

        Args:
            key_path: Dot-separated path to the setting (e.g., 'resolver.dubbed')
            value: New value for the setting (validated by the schema)

        Raises:
            ConfigurationError: If key path is invalid or value is invalid
        """
        with self._lock:
            if self._settings is None:
                raise ConfigurationError("Settings not loaded")

            settings_dict = self._settings.model_dump()

            keys = key_path.split('.')
            current = settings_dict

            for key in keys[:-1]:
                if not isinstance(current, dict) or key not in current:
                    raise ConfigurationError(f"Invalid setting path: {key_path}")
                current = current[key]

            final_key = keys[-1]
            if not isinstance(current, dict) or final_key not in current:
                raise ConfigurationError(f"Invalid setting key: {final_key}")

            current[final_key] = value

            try:
                updated_settings = AppSettings.model_validate(settings_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid setting value for {key_path}: {e}", str(self._settings_file))

            self._save(self._settings_file, updated_settings)
            self._settings = updated_settings
            logger.info(f"Setting updated: {key_path} = {value}")

    def get_setting(self, key_path: str, default: Any = None) -> Any:
        """
        Get a specific setting using dot notation.

        Args:
            key_path: Dot-separated path to the setting
            default: Default value if setting not found
        """
        with self._lock:
            if self._settings is None:
                return default

            current: Any = self._settings.model_dump()
            try:
                for key in key_path.split('.'):
                    current = current[key]
                return current
            except (KeyError, TypeError):
                return default

    def update_source_config(self, source_name: str, config: Dict[str, Any]) -> None:
        """
        Update configuration for a specific source.

        Args:
            source_name: Name of the provider plugin
            config: Fields of SourceConfig to change

        Raises:
            ConfigurationError: If configuration is invalid
        """
        with self._lock:
            if self._sources is None:
                raise ConfigurationError("Sources configuration not loaded")

            sources_dict = self._sources.model_dump()
            sources_dict['sources'].setdefault(source_name, {}).update(config)

            try:
                updated_sources = SourcesConfig.model_validate(sources_dict)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid source configuration: {e}", str(self._sources_file))

            self._save(self._sources_file, updated_sources)
            self._sources = updated_sources
            logger.info(f"Source configuration updated: {source_name}")

    def enable_source(self, source_name: str) -> None:
        """Enable a source plugin."""
        self.update_source_config(source_name, {"enabled": True})

    def disable_source(self, source_name: str) -> None:
        """Disable a source plugin."""
        self.update_source_config(source_name, {"enabled": False})

    def get_enabled_sources(self) -> Dict[str, SourceConfig]:
        """Get all enabled source configurations, by priority."""
        return self.sources.get_enabled_sources()

    def reset_to_defaults(self) -> None:
        """Reset all configuration to default values."""
        with self._lock:
            logger.warning("Resetting configuration to defaults")
            self._settings = get_default_settings()
            self._sources = get_default_sources()
            self._save(self._settings_file, self._settings)
            self._save(self._sources_file, self._sources)

    def validate_configuration(self) -> Dict[str, Any]:
        """
        Validate current configuration and return a report.

        Returns:
            Dictionary with ``valid``, ``issues`` and ``warnings``
        """
        report: Dict[str, Any] = {
            "valid": True,
            "issues": [],
            "warnings": []
        }

        for label, model, current in (
            ("Settings", AppSettings, self._settings),
            ("Sources", SourcesConfig, self._sources),
        ):
            if current is None:
                report["valid"] = False
                report["issues"].append(f"{label} not loaded")
                continue
            try:
                model.model_validate(current.model_dump())
            except ValidationError as e:
                report["valid"] = False
                report["issues"].append(f"{label} validation failed: {e}")

        if not self.get_enabled_sources():
            report["warnings"].append("No sources are enabled")

        return report


__all__ = ["ConfigManager"]
