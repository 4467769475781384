"""Configuration management for Taskline."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ConfigModel:
    """Global configuration model for Taskline."""

    # File paths
    data_dir: str = "~/.taskline"
    data_file: str = "tasks.txt"

    # Behavior settings
    reject_duplicates: bool = True

    # Logging and display
    log_level: str = "WARNING"
    no_color: bool = False

    def __post_init__(self):
        """Post-initialization setup."""
        self.data_dir = os.path.expanduser(str(self.data_dir))
        self.data_file = os.path.expanduser(str(self.data_file))
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            logger.warning("Unknown log level %r, using WARNING", self.log_level)
            self.log_level = "WARNING"

    @property
    def data_path(self) -> Path:
        """Path of the task file. An absolute ``data_file`` wins over ``data_dir``."""
        return Path(self.data_dir) / self.data_file

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "data_dir": self.data_dir,
            "data_file": self.data_file,
            "reject_duplicates": self.reject_duplicates,
            "log_level": self.log_level,
            "no_color": self.no_color,
        }
        return yaml.safe_dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            logger.warning("Configuration is not a mapping, using defaults")
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(map(str, unknown)))

        return cls(**{key: value for key, value in data.items() if key in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"


class Config:
    """Configuration manager for Taskline."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file or create default."""
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path).expanduser()

        if config_path.exists():
            try:
                config = ConfigModel.from_yaml(config_path.read_text(encoding="utf-8"))
                logger.info("Loaded configuration from %s", config_path)
            except (OSError, yaml.YAMLError, TypeError) as e:
                logger.warning("Failed to load config from %s: %s", config_path, e)
                logger.warning("Using default configuration.")
        else:
            # Create default config file
            cls.save(config, config_path)

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(config.to_yaml(), encoding="utf-8")
            logger.info("Configuration saved to %s", config_path)
        except OSError as e:
            logger.error("Failed to save config to %s: %s", config_path, e)

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
