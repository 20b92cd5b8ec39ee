"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/cesta.db"),
        description="SQLite database location.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for mutating endpoints.",
    )
    default_user_id: str = Field(
        default="local",
        min_length=1,
        description="User id assumed when a request carries no X-User-ID header.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    server_host: str = Field(default="127.0.0.1", description="Interface the API server binds to.")
    server_port: int = Field(default=8000, ge=1, le=65535, description="API server port.")
    server_reload: bool = Field(
        default=False,
        description="Restart the API server on code changes (development only).",
    )
    server_duration: Optional[float] = Field(
        default=None,
        gt=0,
        description="Stop the API server after this many seconds when set.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_port(value: str) -> Optional[int]:
    try:
        port = int(value)
    except ValueError:
        return None
    return port if 0 < port <= 65535 else None


def _coerce_seconds(value: str) -> Optional[float]:
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds > 0 else None


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip().strip('"').strip("'")
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("CESTA_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (api_token := _env("CESTA_API_TOKEN")):
        payload["api_token"] = api_token
    if (user_id := _env("CESTA_DEFAULT_USER_ID")):
        payload["default_user_id"] = user_id.strip() or "local"
    if (log_level := _env("CESTA_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("CESTA_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("CESTA_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (host := _env("CESTA_SERVER_HOST")):
        payload["server_host"] = host.strip()
    if (port := _env("CESTA_SERVER_PORT")) and (parsed_port := _coerce_port(port)):
        payload["server_port"] = parsed_port
    if (reload_flag := _env("CESTA_SERVER_RELOAD")):
        payload["server_reload"] = _coerce_bool(reload_flag)
    if (duration := _env("CESTA_SERVER_DURATION")) and (seconds := _coerce_seconds(duration)):
        payload["server_duration"] = seconds
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
