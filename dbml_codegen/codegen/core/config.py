"""
Configuration management for code generation.

Builds the immutable per-run GenerationOptions by merging defaults, an
optional JSON configuration file and command-line overrides.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...errors import ConfigurationError
from .naming import NameFormat, resolve_case


class ConfigError(ConfigurationError):
    """Exception raised for configuration-related errors."""

    pass


CONTEXT_NAME_MODES = ("context", "database")


@dataclass(frozen=True)
class GenerationOptions:
    """Settings for one generation run."""

    # Input
    provider: Optional[str] = None
    database: Optional[str] = None  # connection string or database file
    schema_file: Optional[str] = None

    # Output
    output_name: Optional[str] = None
    output_dir: str = "."
    export_file: Optional[str] = None
    language: Optional[str] = None
    namespace: Optional[str] = None

    # Schema shaping
    include_schema_qualifier: bool = False
    generate_repository: bool = False
    include_stored_procedures: bool = False
    context_name_mode: str = "context"
    aliases: Optional[str] = None  # JSON file of table and column aliases

    # Naming
    pluralize: bool = False
    case: Optional[str] = None  # leave, camel, pascal; anything else -> net
    culture: str = "en-US"

    # Diagnostics
    debug: bool = False
    verbose: bool = False

    @property
    def name_format(self) -> NameFormat:
        return NameFormat(
            pluralize=self.pluralize,
            case=resolve_case(self.case),
            culture=self.culture,
        )

    def output_filename(self, schema_name: str) -> str:
        """
        File name used to pick a generator by extension: the explicit output
        name, else the database argument without quotes, else the schema name.
        """
        if self.output_name:
            return self.output_name
        if self.database:
            return self.database.replace('"', "")
        return schema_name


class ConfigManager:
    """Loads and merges generation configuration."""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        """Initialize configuration manager with optional default overrides."""
        self._defaults: Dict[str, Any] = asdict(GenerationOptions())
        if defaults:
            self._defaults.update(defaults)

    def load(
        self,
        config_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationOptions:
        """
        Build options from defaults, a config file and explicit overrides.

        Args:
            config_file: Path to JSON configuration file
            overrides: Values that win over the file (e.g. from the CLI);
                None values are ignored

        Returns:
            Merged GenerationOptions

        Raises:
            ConfigError: If the file is unreadable or contains unknown keys
        """
        merged = dict(self._defaults)

        if config_file:
            merged.update(self._load_config_file(config_file))

        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        return self._dict_to_options(merged)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_options(self, config_dict: Dict[str, Any]) -> GenerationOptions:
        """Convert dictionary to GenerationOptions, rejecting unknown keys."""
        known_fields = {f.name for f in fields(GenerationOptions)}
        unknown = sorted(set(config_dict) - known_fields)
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")

        mode = str(config_dict.get("context_name_mode") or "context").lower()
        if mode not in CONTEXT_NAME_MODES:
            raise ConfigError(
                f"Invalid context_name_mode: {mode} "
                f"(expected one of {', '.join(CONTEXT_NAME_MODES)})"
            )
        config_dict["context_name_mode"] = mode

        return GenerationOptions(**config_dict)


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenerationOptions:
    """
    Convenience function to load configuration.

    Args:
        config_file: Path to JSON configuration file
        overrides: Explicit overrides

    Returns:
        Merged GenerationOptions
    """
    return ConfigManager().load(config_file, overrides)
