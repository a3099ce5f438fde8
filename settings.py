from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_DATA_DIR_ENV = "GHCN_DATA_DIR"
_STATION_FILE_ENV = "GHCN_STATION_FILE"
_INVENTORY_FILE_ENV = "GHCN_INVENTORY_FILE"
_CSV_EXTENSION_ENV = "GHCN_CSV_EXTENSION"
_CACHE_SIZE_ENV = "GHCN_CACHE_SIZE"
_MALFORMED_LINES_ENV = "GHCN_MALFORMED_LINES"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_MALFORMED_LINE_CHOICES = ("skip", "abort")


@dataclass(frozen=True)
class Settings:
    data_dir: str
    station_file: str
    inventory_file: Optional[str]
    csv_extension: str
    cache_size: int
    malformed_lines: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_csv_extension(default: str) -> str:
    candidate = _read_str_env(_CSV_EXTENSION_ENV, default)
    return candidate if candidate.startswith(".") else f".{candidate}"


def _read_cache_size(default: int) -> int:
    value = os.getenv(_CACHE_SIZE_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_malformed_lines(default: str) -> str:
    candidate = _read_str_env(_MALFORMED_LINES_ENV, default).lower()
    return candidate if candidate in _MALFORMED_LINE_CHOICES else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        data_dir=_read_str_env(_DATA_DIR_ENV, "./data"),
        station_file=_read_str_env(_STATION_FILE_ENV, "ghcnd-stations.txt"),
        inventory_file=_read_optional_env(_INVENTORY_FILE_ENV, "ghcnd-inventory.txt"),
        csv_extension=_read_csv_extension(".csv"),
        cache_size=_read_cache_size(64),
        malformed_lines=_read_malformed_lines("skip"),
        log_level=_read_log_level("INFO"),
    )
