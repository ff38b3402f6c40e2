"""
Configuration Management for sumextras

Centralized settings for summary-table construction, label resolution,
the compact display theme and logging.

Usage:
    from config import CONFIG

    # Access config
    print(CONFIG.get('table.missing_symbol'))

    # Update config (runtime)
    CONFIG.update('table.pvalue_digits', 2)

    # Get with default
    value = CONFIG.get('some.nested.key', default='default_value')

Environment overrides use the form SUMEXTRAS_<SECTION>_<KEY>, e.g.
SUMEXTRAS_THEME_COMPACT_ON_IMPORT=false.
"""

import copy
import json
import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional


class ConfigManager:
    """
    Centralized configuration management with hierarchical key access.

    Supports:
    - Nested dictionary access with dot notation
    - Environment variable overrides
    - Config validation
    - Runtime updates
    """

    def __init__(self, config_dict: Optional[Dict] = None):
        """
        Create a ConfigManager populated with the given configuration or the module defaults and apply environment variable overrides.

        Parameters:
            config_dict (dict | None): Optional initial configuration dictionary to use instead of the built-in defaults.
        """
        self._config = config_dict or self._get_default_config()
        self._env_prefix = "SUMEXTRAS_"
        self._load_env_overrides()

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """
        Provide the default nested configuration.

        Returns:
            Dict[str, Any]: Sections 'table', 'labels', 'theme' and 'logging'.
        """
        return {

            # ========== SUMMARY TABLE SETTINGS ==========
            "table": {
                "label_header": "Characteristic",
                "overall_label": "Overall",
                "pvalue_header": "p-value",
                "missing_text": "Unknown",
                "missing_symbol": "---",
                "categorical_max_levels": 10,  # numeric columns with fewer unique values are categorical
                "continuous_digits": None,  # None -> guessed from the IQR
                "pvalue_digits": 3,  # used by extras()
                "level_indent": "1.5em",
            },

            # ========== DICTIONARY / LABEL SETTINGS ==========
            "labels": {
                "variable_column": "Variable",
                "description_column": "Description",
                "warn_on_duplicates": True,
            },

            # ========== THEME SETTINGS ==========
            "theme": {
                "compact_on_import": True,
                "font_size": 13,
                "padding": 1,
            },

            # ========== LOGGING SETTINGS ==========
            "logging": {
                "enabled": True,
                "logger_name": "sumextras",
                "level": "INFO",  # DEBUG, INFO, WARNING, ERROR, CRITICAL
                "format": "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
                "date_format": "%Y-%m-%d %H:%M:%S",

                # File Logging
                "file_enabled": False,
                "log_dir": "logs",
                "log_file": "sumextras.log",
                "max_log_size": 10485760,  # 10MB in bytes
                "backup_count": 5,

                # Console Logging
                "console_enabled": True,
                "console_level": "WARNING",

                # What to Log
                "log_table_operations": True,
                "log_performance": False,  # Timing information
            },
        }

    @staticmethod
    def _coerce_env_value(value: str) -> Any:
        """
        Convert an environment string to bool, int or float where it looks like one.
        """
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
        if lowered in ("none", "null"):
            return None
        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                continue
        return value

    def _load_env_overrides(self) -> None:
        """
        Apply configuration overrides from environment variables that start with the SUMEXTRAS_ prefix.

        SUMEXTRAS_<SECTION>_<KEY>=value maps to '<section>.<key>' (lowercased, remaining
        underscores kept). Variables without a section and key are ignored; overrides for
        unknown keys emit a warning and are skipped.
        """
        for key, value in os.environ.items():
            if key.startswith(self._env_prefix):
                # SUMEXTRAS_TABLE_MISSING_SYMBOL -> ['table', 'missing', 'symbol']
                parts = key[len(self._env_prefix):].lower().split('_')

                if len(parts) < 2:
                    continue

                section = parts[0]
                key_name = '_'.join(parts[1:])

                try:
                    self.update(f"{section}.{key_name}", self._coerce_env_value(value))
                except (KeyError, ValueError, TypeError) as e:
                    warnings.warn(f"Failed to set env override {key}={value}: {e}", stacklevel=2)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a configuration value using a dot-separated key path.

        Parameters:
            key (str): Dot-separated path to a nested configuration value (e.g., "table.missing_symbol").
            default: Value to return if the specified path does not exist.

        Returns:
            The configuration value at the given path, or `default` if the path is not found.
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def update(self, key: str, value: Any) -> None:
        """
        Set an existing configuration value identified by a dot-separated path.

        Raises:
            KeyError: If any intermediate path segment or the final key does not exist in the configuration.
        """
        keys = key.split('.')
        config = self._config

        # Navigate to parent key
        for k in keys[:-1]:
            if k not in config:
                raise KeyError(f"Config path '{'.'.join(keys[:-1])}' does not exist")
            config = config[k]

        final_key = keys[-1]
        if final_key not in config:
            raise KeyError(f"Config key '{key}' does not exist")

        config[final_key] = value

    def set_nested(self, key: str, value: Any, create: bool = False) -> None:
        """
        Set a value using a dot-separated path, optionally creating missing intermediate dictionaries.
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                if create:
                    config[k] = {}
                else:
                    raise KeyError(f"Config path '{k}' does not exist")
            config = config[k]

        config[keys[-1]] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Return a deep copy of a top-level configuration section.
        """
        result = self.get(section, {})
        return copy.deepcopy(result) if isinstance(result, dict) else result

    def to_dict(self) -> Dict[str, Any]:
        """Get a deep copy of the entire configuration dictionary."""
        return copy.deepcopy(self._config)

    def to_json(self, filepath: Optional[str] = None, pretty: bool = True) -> str:
        """
        Serialize the current configuration to a JSON string.

        Parameters:
            filepath (str | None): Optional path to write the JSON output to; the file is overwritten.
            pretty (bool): Indent the output when True.
        """
        json_str = json.dumps(self._config, indent=2 if pretty else None)

        if filepath:
            Path(filepath).write_text(json_str)

        return json_str

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate key configuration constraints and collect any violations.

        Checks:
        - `table.missing_symbol` is a string.
        - `table.pvalue_digits` is 1, 2 or 3.
        - `table.categorical_max_levels` is a positive integer.
        - `logging.level` is a standard level name.

        Returns:
            tuple: (is_valid, errors)
        """
        errors = []

        if not isinstance(self.get('table.missing_symbol'), str):
            errors.append("table.missing_symbol must be a string")

        if self.get('table.pvalue_digits') not in (1, 2, 3):
            errors.append("table.pvalue_digits must be 1, 2 or 3")

        max_levels = self.get('table.categorical_max_levels')
        if not isinstance(max_levels, int) or max_levels < 1:
            errors.append("table.categorical_max_levels must be a positive integer")

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.get('logging.level') not in valid_levels:
            errors.append(f"logging.level must be one of {valid_levels}")

        return len(errors) == 0, errors

    def __repr__(self) -> str:
        return f"ConfigManager({len(self._config)} sections)"


# Global config instance
CONFIG = ConfigManager()
