from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, List, Sequence

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .ingest.overpass import DEFAULT_ENDPOINTS
from .util.http import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .util.logging import resolve_level


class AppSettings(BaseModel):
    endpoints: List[str] = Field(default_factory=lambda: list(DEFAULT_ENDPOINTS))
    cache_dir: Path = Field(default=Path("cache/osm"))
    cache_ext: str = Field(default=".xml")
    cache_valid_days: float = Field(default=60, ge=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    logs_dir: Path = Field(default=Path("logs"))
    log_level: str = Field(default="INFO")
    no_cache: bool = Field(default=False)

    @field_validator("endpoints")
    @classmethod
    def _require_endpoints(cls, value: List[str]) -> List[str]:
        cleaned = [v.strip() for v in value if v and v.strip()]
        if not cleaned:
            raise ValueError("at least one endpoint is required")
        return cleaned

    @field_validator("cache_ext")
    @classmethod
    def _dotted_ext(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("cache extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        resolve_level(value)
        return value.strip().upper()

    @property
    def cache_validity(self) -> timedelta:
        return timedelta(days=self.cache_valid_days)


def _env_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return float(value)


def _cli_or_env_float(cli_value: Any | None, env_key: str, default: float) -> float:
    if cli_value is not None:
        return float(cli_value)
    return _env_float(env_key, default)


def _endpoints(cli_value: Sequence[str] | None) -> List[str]:
    if cli_value:
        return list(cli_value)
    raw = os.getenv("OSM_ENDPOINTS")
    if raw:
        return raw.split(",")
    return list(DEFAULT_ENDPOINTS)


def load_settings(cli_args: dict[str, Any] | None = None) -> AppSettings:
    load_dotenv()
    cli_args = cli_args or {}

    data: dict[str, Any] = {
        "endpoints": _endpoints(cli_args.get("endpoints")),
        "cache_dir": Path(cli_args.get("cache_dir") or os.getenv("CACHE_DIR", "cache/osm")).expanduser(),
        "cache_ext": cli_args.get("cache_ext") or os.getenv("CACHE_EXT", ".xml"),
        "cache_valid_days": _cli_or_env_float(cli_args.get("valid_days"), "CACHE_VALID_DAYS", 60),
        "timeout": _cli_or_env_float(cli_args.get("timeout"), "HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        "user_agent": cli_args.get("user_agent") or os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
        "logs_dir": Path(cli_args.get("logs_dir") or os.getenv("LOGS_DIR", "logs")).expanduser(),
        "log_level": cli_args.get("log_level") or os.getenv("LOG_LEVEL", "INFO"),
        "no_cache": bool(cli_args.get("no_cache")) or _env_bool("NO_CACHE", False),
    }

    try:
        settings = AppSettings(**data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}")

    settings.cache_dir.mkdir(parents=True, exist_ok=True)
    settings.logs_dir.mkdir(parents=True, exist_ok=True)
    return settings
