from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .cache.layout import default_cache_root
from .errors import ConfigError
from .util.http import DEFAULT_TIMEOUT
from .util.time import MS_PER_DAY

DEFAULT_CACHE_TTL_MS = 7 * MS_PER_DAY
DEFAULT_USER_AGENT = "dlxbin/0.1 (+https://pypi.org/project/dlxbin/)"


class DlxSettings(BaseModel):
    cache_dir: Path
    cache_ttl_ms: int = Field(default=DEFAULT_CACHE_TTL_MS, ge=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    http_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    http_retries: int = Field(default=3, ge=0)
    logs_dir: Path
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def _pick(cli_args: dict[str, Any], key: str, env_key: str) -> Optional[Any]:
    value = cli_args.get(key)
    if value is not None:
        return value
    env_value = os.getenv(env_key)
    if env_value is None or env_value.strip() == "":
        return None
    return env_value


def load_settings(cli_args: dict[str, Any] | None = None) -> DlxSettings:
    load_dotenv(find_dotenv(usecwd=True))
    cli_args = cli_args or {}

    home = Path.home()
    cache_dir = Path(_pick(cli_args, "cache_dir", "DLX_CACHE_DIR") or default_cache_root(home)).expanduser()
    logs_dir = Path(_pick(cli_args, "logs_dir", "DLX_LOGS_DIR") or home / ".dlxbin" / "logs").expanduser()

    data: dict[str, Any] = {
        "cache_dir": cache_dir,
        "logs_dir": logs_dir,
    }
    for field, env_key in (
        ("cache_ttl_ms", "DLX_CACHE_TTL_MS"),
        ("user_agent", "DLX_USER_AGENT"),
        ("http_timeout", "DLX_HTTP_TIMEOUT"),
        ("http_retries", "DLX_HTTP_RETRIES"),
        ("log_level", "DLX_LOG_LEVEL"),
    ):
        value = _pick(cli_args, field, env_key)
        if value is not None:
            data[field] = value

    try:
        return DlxSettings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
