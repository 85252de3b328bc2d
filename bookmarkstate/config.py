from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

from .urls import DEFAULT_URL_SCHEMES


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_csv(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    return tuple(part.strip().lower() for part in v.split(",") if part.strip())


@dataclass
class Settings:
    # Locations
    url_schemes: Tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_URL_SCHEMES))

    # CLI defaults
    default_parent_folder_id: int = 0

    # Logging / UX
    log_level: str = "INFO"
    state_log_level: str = ""
    no_color: bool = False

    @staticmethod
    def from_env() -> "Settings":
        s = Settings()
        s.url_schemes = _env_csv("BOOKMARKSTATE_URL_SCHEMES", s.url_schemes)
        s.default_parent_folder_id = _env_int("BOOKMARKSTATE_DEFAULT_PARENT", s.default_parent_folder_id)
        s.log_level = _env_str("BOOKMARKSTATE_LOG_LEVEL", s.log_level)
        s.state_log_level = _env_str("BOOKMARKSTATE_STATE_LOG_LEVEL", s.state_log_level)
        s.no_color = _env_bool("BOOKMARKSTATE_NO_COLOR", s.no_color)
        return s

    @staticmethod
    def from_file(path: Path) -> "Settings":
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        s = Settings.from_env()
        for k, v in data.items():
            if not hasattr(s, k):
                continue
            if k == "url_schemes" and isinstance(v, (list, tuple)):
                v = tuple(str(x).strip().lower() for x in v if str(x).strip())
            setattr(s, k, v)
        return s


def load_settings(config_path: Optional[str]) -> Settings:
    if config_path:
        return Settings.from_file(Path(config_path))
    return Settings.from_env()
