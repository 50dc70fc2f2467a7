"""Configuration loader with environment variable substitution"""

import json
import os
import re
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv

from logsink.config.models import LogSinkConfig
from logsink.config.validator import validate_config_constraints

DEFAULT_CONFIG_PATH = "config/logsink.json"

# ${VAR_NAME} references inside string values
_ENV_REF = re.compile(r"\$\{([^}]+)\}")


def _expand(text: str) -> str:
    def lookup(match: "re.Match[str]") -> str:
        name = match.group(1)
        value = os.getenv(name)
        if value is None:
            raise ValueError(f"Environment variable {name} not found but required in config")
        return value

    return _ENV_REF.sub(lookup, text)


def substitute_env_vars(data: Any) -> Any:
    """Expand ``${VAR}`` references in every string of a decoded JSON document."""
    if isinstance(data, str):
        return _expand(data)
    if isinstance(data, dict):
        return {key: substitute_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [substitute_env_vars(item) for item in data]
    return data


def _checked_config_path(config_path: str) -> Path:
    """Reject ``..`` segments and anything that is not a ``.json`` file."""
    parts = re.split(r"[\\/]", config_path)
    if ".." in parts:
        raise ValueError(f"Config path contains path traversal sequence: {config_path}")

    path = Path(config_path)
    if path.suffix.lower() != ".json":
        raise ValueError(f"Config path must point to a .json file, got: {config_path}")
    return path


def parse_config(config_data: dict) -> LogSinkConfig:
    """
    Build and validate a LogSinkConfig from already-loaded data.

    Raises:
        ValueError: If config validation fails
    """
    data = substitute_env_vars(config_data)
    try:
        config = LogSinkConfig(**data)
        validate_config_constraints(config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")
    return config


def load_config(config_path: str = DEFAULT_CONFIG_PATH, load_env: bool = True) -> LogSinkConfig:
    """
    Load and validate sink configuration from a JSON file.

    Args:
        config_path: Path to config JSON file
        load_env: Whether to load .env file first (default: True)

    Returns:
        Validated LogSinkConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails or path is unsafe
        json.JSONDecodeError: If config file is invalid JSON
    """
    if load_env:
        load_dotenv()

    path = _checked_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        return parse_config(json.load(f))


def config_summary(config: LogSinkConfig) -> List[str]:
    """Human-readable lines describing the effective sink settings."""
    sink = config.sink
    return [
        f"  Directory: {sink.directory or '(app data)'}",
        f"  File name: {sink.file_name}",
        f"  Max bytes: {sink.max_bytes}",
        f"  Min level: {sink.min_level}",
        f"  Flush interval: {sink.flush_interval_ms}ms",
        f"  Logger: {config.logger_name or '(root)'}",
    ]
