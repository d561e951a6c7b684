"""
Configuration system for csfmorph

Provides configuration management with support for files and environment variables.
Includes validation, default value handling, and configuration merging.
"""

import os
import json
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from enum import Enum
import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class WriteMode(Enum):
    """How split outputs are written to existing files."""

    TRUNCATE = "truncate"
    APPEND = "append"


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes", "on")


class ConfigurationManager:
    """Manages configuration loading, validation, and merging."""

    DEFAULT_CONFIG_PATHS = [
        "csfmorph.json",
        "csfmorph.yaml",
        "csfmorph.yml",
        ".csfmorph.json",
        ".csfmorph.yaml",
        ".csfmorph.yml",
        os.path.expanduser("~/.csfmorph.json"),
        os.path.expanduser("~/.csfmorph.yaml"),
    ]

    @staticmethod
    def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
        """Find the first existing configuration file."""
        paths = search_paths or ConfigurationManager.DEFAULT_CONFIG_PATHS

        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_config_file(config_path: str) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError("Configuration file must contain a mapping")
        return data

    @staticmethod
    def load_env_config() -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        morph = {}
        if os.getenv("CSFMORPH_STORYBOOK_MODULE"):
            morph["storybook_module"] = os.getenv("CSFMORPH_STORYBOOK_MODULE")

        if os.getenv("CSFMORPH_META_IDENTIFIER"):
            morph["meta_identifier"] = os.getenv("CSFMORPH_META_IDENTIFIER")

        if os.getenv("CSFMORPH_STORY_FILE_EXTENSION"):
            morph["story_file_extension"] = os.getenv("CSFMORPH_STORY_FILE_EXTENSION")

        strict = _env_flag("CSFMORPH_STRICT_PARSE")
        if strict is not None:
            morph["strict_parse"] = strict

        if morph:
            config["morph"] = morph

        output = {}
        if os.getenv("CSFMORPH_WRITE_MODE"):
            write_mode = os.getenv("CSFMORPH_WRITE_MODE").lower()
            if write_mode in [m.value for m in WriteMode]:
                output["write_mode"] = write_mode
            else:
                logger.warning("Invalid CSFMORPH_WRITE_MODE value, using default")

        dry_run = _env_flag("CSFMORPH_DRY_RUN")
        if dry_run is not None:
            output["dry_run"] = dry_run

        backup = _env_flag("CSFMORPH_BACKUP_ENABLED")
        if backup is not None:
            output["backup_enabled"] = backup

        if output:
            config["output"] = output

        if os.getenv("CSFMORPH_EXCLUDE_PATTERNS"):
            config["discovery"] = {
                "exclude_patterns": os.getenv("CSFMORPH_EXCLUDE_PATTERNS").split(",")
            }

        return config

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge multiple configuration dictionaries, with later ones taking precedence."""
        result = {}

        for config in configs:
            if not config:
                continue

            for key, value in config.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = ConfigurationManager.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    @staticmethod
    def validate_config(config_data: Dict[str, Any]) -> None:
        """Validate configuration data."""
        if "morph" in config_data:
            morph = config_data["morph"]

            for key in ("storybook_module", "meta_identifier", "story_file_extension"):
                if key in morph and (not isinstance(morph[key], str) or not morph[key].strip()):
                    raise ConfigurationError(f"{key} must be a non-empty string")

            if "meta_identifier" in morph and not morph["meta_identifier"].isidentifier():
                raise ConfigurationError("meta_identifier must be a valid identifier")

            ext = morph.get("story_file_extension")
            if isinstance(ext, str) and ("/" in ext or "\\" in ext):
                raise ConfigurationError("story_file_extension must not contain path separators")

        if "output" in config_data:
            output = config_data["output"]

            if "write_mode" in output:
                valid_modes = [m.value for m in WriteMode]
                if output["write_mode"] not in valid_modes:
                    raise ConfigurationError(f"write_mode must be one of: {valid_modes}")

            if "encoding" in output:
                try:
                    "".encode(output["encoding"])
                except (LookupError, TypeError):
                    raise ConfigurationError(f"Unknown encoding: {output['encoding']}")

        if "discovery" in config_data:
            patterns = config_data["discovery"].get("exclude_patterns", [])
            if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
                raise ConfigurationError("exclude_patterns must be a list of strings")


@dataclass
class MorphConfig:
    """Configuration for the story transformations."""

    storybook_module: str = "@storybook/react"
    meta_identifier: str = "meta"
    story_file_extension: str = "tsx"
    strict_parse: bool = True


@dataclass
class OutputConfig:
    """Configuration for writing results."""

    write_mode: WriteMode = WriteMode.TRUNCATE
    dry_run: bool = False
    backup_enabled: bool = False
    encoding: str = "utf-8"


@dataclass
class DiscoveryConfig:
    """Configuration for locating story files."""

    exclude_patterns: List[str] = field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.git/**",
            "**/dist/**",
            "**/build/**",
        ]
    )


@dataclass
class CsfMorphConfig:
    """Main configuration class for csfmorph."""

    morph_settings: MorphConfig = field(default_factory=MorphConfig)
    output_settings: OutputConfig = field(default_factory=OutputConfig)
    discovery_settings: DiscoveryConfig = field(default_factory=DiscoveryConfig)

    @classmethod
    def default(cls) -> "CsfMorphConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_env: bool = True,
        validate: bool = True,
    ) -> "CsfMorphConfig":
        """
        Load configuration from multiple sources with precedence:
        1. Default values
        2. Configuration file
        3. Environment variables (if use_env=True)

        Args:
            config_path: Path to configuration file. If None, searches for default files.
            use_env: Whether to load environment variables
            validate: Whether to validate the configuration
        """
        configs_to_merge = []

        file_config = {}
        if config_path:
            file_config = ConfigurationManager.load_config_file(config_path)
        else:
            found_config = ConfigurationManager.find_config_file()
            if found_config:
                file_config = ConfigurationManager.load_config_file(found_config)
                logger.info(f"Loaded configuration from: {found_config}")

        configs_to_merge.append(file_config)

        if use_env:
            configs_to_merge.append(ConfigurationManager.load_env_config())

        merged_config = ConfigurationManager.merge_configs(*configs_to_merge)

        if validate:
            ConfigurationManager.validate_config(merged_config)

        return cls.from_dict(merged_config)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CsfMorphConfig":
        morph_config = MorphConfig()
        for key, value in data.get("morph", {}).items():
            if hasattr(morph_config, key):
                setattr(morph_config, key, value)

        output_config = OutputConfig()
        for key, value in data.get("output", {}).items():
            if hasattr(output_config, key):
                if key == "write_mode" and isinstance(value, str):
                    setattr(output_config, key, WriteMode(value))
                else:
                    setattr(output_config, key, value)

        discovery_config = DiscoveryConfig()
        for key, value in data.get("discovery", {}).items():
            if hasattr(discovery_config, key):
                setattr(discovery_config, key, value)

        return cls(
            morph_settings=morph_config,
            output_settings=output_config,
            discovery_settings=discovery_config,
        )

    @classmethod
    def from_file(cls, config_path: str) -> "CsfMorphConfig":
        """Load configuration from a JSON or YAML file."""
        return cls.load(config_path=config_path, use_env=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "morph": asdict(self.morph_settings),
            "output": {
                **asdict(self.output_settings),
                "write_mode": self.output_settings.write_mode.value,
            },
            "discovery": asdict(self.discovery_settings),
        }

    def to_file(self, config_path: str, format: str = "json") -> None:
        """
        Save configuration to file.

        Args:
            config_path: Path to save configuration
            format: File format ('json' or 'yaml')
        """
        config_data = self.to_dict()

        try:
            with open(config_path, "w", encoding="utf-8") as f:
                if format.lower() in ("yaml", "yml"):
                    yaml.dump(config_data, f, default_flow_style=False, indent=2)
                else:
                    json.dump(config_data, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration file: {e}")

    def validate(self) -> None:
        """Validate the current configuration."""
        ConfigurationManager.validate_config(self.to_dict())

    def get_config_summary(self) -> str:
        """Get a human-readable summary of the configuration."""
        return f"""csfmorph Configuration Summary:
Morph:
  - Storybook module: {self.morph_settings.storybook_module}
  - Meta identifier: {self.morph_settings.meta_identifier}
  - Story file extension: {self.morph_settings.story_file_extension}
  - Strict parse: {self.morph_settings.strict_parse}

Output:
  - Write mode: {self.output_settings.write_mode.value}
  - Dry run: {self.output_settings.dry_run}
  - Backup enabled: {self.output_settings.backup_enabled}
  - Encoding: {self.output_settings.encoding}

Discovery:
  - Excluded patterns: {len(self.discovery_settings.exclude_patterns)} patterns
"""


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> CsfMorphConfig:
    """
    Load configuration from file and/or environment variables.

    Args:
        config_path: Path to configuration file
        use_env: Whether to load environment variables

    Returns:
        CsfMorphConfig: Loaded configuration
    """
    return CsfMorphConfig.load(config_path=config_path, use_env=use_env)
