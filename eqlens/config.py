"""Project-level .env config reader for EQLENS_* settings."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

# Project root .env (next to pyproject.toml)
_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "json"
LOG_FORMATS = ("json", "text")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def env_path() -> Path:
    """Return the .env file path."""
    return _ENV_FILE


def read_config() -> dict[str, str]:
    """Read all EQLENS_* variables from the project .env file."""
    config: dict[str, str] = {}
    if not _ENV_FILE.exists():
        return config
    for line in _ENV_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = re.match(r"^(EQLENS_[A-Z0-9_]*)=(.*)$", line)
        if match:
            config[match.group(1)] = match.group(2).strip("\"'")
    return config


def get_key(key: str) -> str | None:
    """Get a single key value, checking .env then os.environ."""
    config = read_config()
    if key in config:
        return config[key]
    return os.environ.get(key) or None


def get_bool(key: str, default: bool = False) -> bool:
    raw = get_key(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


def get_log_level(default: str = DEFAULT_LOG_LEVEL) -> int:
    """Resolve EQLENS_LOG_LEVEL to a logging level, falling back on junk."""
    raw = (get_key("EQLENS_LOG_LEVEL") or default).upper()
    level = getattr(logging, raw, None)
    if isinstance(level, int):
        return level
    return getattr(logging, default.upper(), logging.WARNING)


def get_log_format(default: str = DEFAULT_LOG_FORMAT) -> str:
    raw = (get_key("EQLENS_LOG_FORMAT") or default).lower()
    return raw if raw in LOG_FORMATS else default
