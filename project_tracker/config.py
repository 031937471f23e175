import os
from dataclasses import dataclass, field
from pathlib import Path
import logging
from typing import Any, Dict, Optional

import yaml  # type: ignore
from dotenv import load_dotenv  # type: ignore

from project_tracker.constants import (
    DEFAULT_API_URL,
    DEFAULT_CLIENT_TIMEOUT_SECONDS,
    DEFAULT_HOST,
    DEFAULT_LOG_FILE,
    DEFAULT_PORT,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised when a configuration value is out of range or malformed."""


def deep_merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = deep_merge_dicts(dict(base.get(key, {})), value)
        else:
            base[key] = value
    return base


def get_user_config_path() -> Path:
    if os.name == 'posix':  # Linux/macOS
        config_base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    else:  # Windows
        config_base = Path(os.environ.get('APPDATA', Path.home() / 'AppData' / 'Roaming'))
    return config_base / "project_tracker" / "config.yml"


def get_project_config_path(cwd: Optional[Path] = None) -> Path:
    start_dir = Path(cwd or os.environ.get('TRACKER_CWD', os.getcwd())).resolve()
    return start_dir / ".project_tracker" / "config.yml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(cwd: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration by merging multiple locations with clear precedence.

    Precedence (lowest → highest):
      1. Package default (project_tracker/config.yml)
      2. User config (~/.config/project_tracker/config.yml or %APPDATA%/project_tracker/config.yml)
      3. Project config (<cwd>/.project_tracker/config.yml)
      4. Explicit override via TRACKER_CONFIG_PATH (highest single-file override)

    Environment variables are applied on top by ``Config.load_config``.
    """
    merged: Dict[str, Any] = {}

    layers = [
        ("package default", Path(__file__).parent / "config.yml"),
        ("user", get_user_config_path()),
        ("project", get_project_config_path(cwd)),
    ]
    if os.getenv('TRACKER_CONFIG_PATH'):
        layers.append(("override", Path(os.environ['TRACKER_CONFIG_PATH'])))

    for label, path in layers:
        if path.exists():
            merged = deep_merge_dicts(merged, _read_yaml(path))
            logger.debug(f"Loaded {label} config: {path}")
        elif label == "override":
            logger.warning(f"TRACKER_CONFIG_PATH points to a missing file: {path}")

    return merged


# Load .env from the working directory without clobbering the real environment
load_dotenv(override=False)


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: list = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    level: str = "INFO"
    directory: Optional[Path] = None
    file: str = DEFAULT_LOG_FILE


@dataclass
class ClientConfig:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS


@dataclass
class ValidationConfig:
    name_max_length: int = NAME_MAX_LENGTH
    description_max_length: int = DESCRIPTION_MAX_LENGTH


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    def __post_init__(self):
        if not 0 < int(self.server.port) < 65536:
            raise ConfigError(f"Server port must be between 1 and 65535, got {self.server.port}")
        level = str(self.logging.level).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigError(
                f"Unknown log level '{self.logging.level}'. Valid options: {', '.join(VALID_LOG_LEVELS)}"
            )
        self.logging.level = level
        if self.validation.name_max_length <= 0 or self.validation.description_max_length <= 0:
            raise ConfigError("Form length limits must be positive")

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "Config":
        server = config_data.get("server") or {}
        log = config_data.get("logging") or {}
        client = config_data.get("client") or {}
        validation = config_data.get("validation") or {}
        for name, section in (("server", server), ("logging", log), ("client", client), ("validation", validation)):
            if not isinstance(section, dict):
                raise ConfigError(f"Config section '{name}' must be a mapping")

        try:
            return cls(
                server=ServerConfig(
                    host=str(server.get("host", DEFAULT_HOST)),
                    port=int(server.get("port", DEFAULT_PORT)),
                    cors_origins=list(server.get("cors_origins", ["*"])),
                ),
                logging=LoggingConfig(
                    level=str(log.get("level", "INFO")),
                    directory=Path(log["directory"]).expanduser() if log.get("directory") else None,
                    file=str(log.get("file", DEFAULT_LOG_FILE)),
                ),
                client=ClientConfig(
                    api_url=str(client.get("api_url", DEFAULT_API_URL)).rstrip("/"),
                    timeout=float(client.get("timeout", DEFAULT_CLIENT_TIMEOUT_SECONDS)),
                ),
                validation=ValidationConfig(
                    name_max_length=int(validation.get("name_max_length", NAME_MAX_LENGTH)),
                    description_max_length=int(
                        validation.get("description_max_length", DESCRIPTION_MAX_LENGTH)
                    ),
                ),
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

    @classmethod
    def load_config(cls, config_path: Optional[Path] = None) -> "Config":
        """Load the effective config.

        Merges the YAML layers (or reads ``config_path`` alone when given),
        then applies TRACKER_HOST, TRACKER_PORT, TRACKER_LOG_LEVEL,
        TRACKER_LOG_DIR, TRACKER_API_URL and TRACKER_CLIENT_TIMEOUT from the
        environment.

        Raises:
            ConfigError: If a value is out of range or malformed
        """
        if config_path is None:
            config_data = load_config()
        else:
            config_data = _read_yaml(Path(config_path))

        env_overrides = {
            ("server", "host"): os.getenv("TRACKER_HOST"),
            ("server", "port"): os.getenv("TRACKER_PORT"),
            ("logging", "level"): os.getenv("TRACKER_LOG_LEVEL"),
            ("logging", "directory"): os.getenv("TRACKER_LOG_DIR"),
            ("client", "api_url"): os.getenv("TRACKER_API_URL"),
            ("client", "timeout"): os.getenv("TRACKER_CLIENT_TIMEOUT"),
        }
        for (section, key), value in env_overrides.items():
            if not value:
                continue
            # An empty "server:" block loads as None
            if config_data.get(section) is None:
                config_data[section] = {}
            if isinstance(config_data[section], dict):
                config_data[section][key] = value

        return cls.from_dict(config_data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "cors_origins": list(self.server.cors_origins),
            },
            "logging": {
                "level": self.logging.level,
                "directory": str(self.logging.directory) if self.logging.directory else None,
                "file": self.logging.file,
            },
            "client": {
                "api_url": self.client.api_url,
                "timeout": self.client.timeout,
            },
            "validation": {
                "name_max_length": self.validation.name_max_length,
                "description_max_length": self.validation.description_max_length,
            },
        }
