"""
Configuration for the hook dispatcher.

Values are resolved in three layers, later layers winning:
    1. Dataclass defaults
    2. A YAML file (explicit path, $AGENT_HOOKS_CONFIG, or ./agent-hooks.yaml)
    3. Environment variables, including any found in a .env file
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv, find_dotenv

from .errors import ConfigError
from .logger import logger

DEFAULT_CONFIG_FILE = "agent-hooks.yaml"

# Environment variable -> config field
ENV_OVERRIDES = {
    "AGENT_HOOKS_LOG_DIR": "log_dir",
    "AGENT_HOOKS_MIRROR_DIR": "mirror_dir",
    "AGENT_HOOKS_LOG_LEVEL": "log_level",
    "AGENT_HOOKS_STOP_SOUND": "stop_sound",
    "AGENT_HOOKS_SUBAGENT_SOUND": "subagent_sound",
    "AGENT_HOOKS_REDACT": "redact",
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _default_mirror_dir() -> Path:
    return Path.home() / ".claude" / "agent-hooks"


@dataclass
class HookConfig:
    """
    Runtime settings for one dispatcher invocation.

    Attributes:
        log_dir: Root for the audit store, structured log and primary narrative copy
        mirror_dir: Root for the second narrative copy
        preview_length: Characters of free text kept in narrative entries
        log_level: Level for the diagnostics file
        stop_sound: Command run when the session stops (None disables)
        subagent_sound: Command run when a sub-agent stops (None disables)
        notify_timeout: Seconds before a notification command is abandoned
        redact: Mask secrets in the derived (non-audit) logs
    """
    log_dir: Path = field(default_factory=lambda: Path("logs"))
    mirror_dir: Path = field(default_factory=_default_mirror_dir)
    preview_length: int = 80
    log_level: str = "INFO"
    stop_sound: Optional[str] = None
    subagent_sound: Optional[str] = None
    notify_timeout: float = 10.0
    redact: bool = False

    def __post_init__(self):
        self.log_dir = Path(self.log_dir).expanduser()
        self.mirror_dir = Path(self.mirror_dir).expanduser()
        self.preview_length = int(self.preview_length)
        self.notify_timeout = float(self.notify_timeout)
        if isinstance(self.redact, str):
            self.redact = self.redact.strip().lower() in _TRUE_STRINGS
        if self.preview_length < 1:
            raise ConfigError(f"preview_length must be positive, got {self.preview_length}")

    @property
    def audit_dir(self) -> Path:
        return self.log_dir / "sessions"

    @property
    def structured_dir(self) -> Path:
        return self.log_dir / "ai"

    @property
    def narrative_dirs(self) -> List[Path]:
        """Both narrative copies; equal priority, written independently."""
        return [self.log_dir / "daily", self.mirror_dir / "daily"]

    @property
    def diagnostics_file(self) -> Path:
        return self.log_dir / "hooks.log"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _find_config_file(path: Optional[Union[str, Path]]) -> Optional[Path]:
    if path:
        return Path(path)
    env_path = os.getenv("AGENT_HOOKS_CONFIG")
    if env_path:
        return Path(env_path)
    default = Path.cwd() / DEFAULT_CONFIG_FILE
    return default if default.exists() else None


def load_config(path: Optional[Union[str, Path]] = None) -> HookConfig:
    """
    Build the configuration for this invocation.

    Args:
        path: Optional explicit YAML config file

    Returns:
        A populated HookConfig

    Raises:
        ConfigError: If the config file is unreadable or malformed
    """
    load_dotenv(find_dotenv(usecwd=True))

    known = {f.name for f in fields(HookConfig)}
    values: Dict[str, Any] = {}

    config_file = _find_config_file(path)
    if config_file is not None:
        for key, value in _read_yaml(config_file).items():
            if key not in known:
                logger.warning(f"[config] Ignoring unknown key '{key}' in {config_file}")
                continue
            values[key] = value

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            values[key] = value

    try:
        return HookConfig(**values)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
