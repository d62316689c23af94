"""Resolve catalog configuration from the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_FIXTURE_PATH: Path = Path(__file__).resolve().parents[1] / "data" / "artwork-data.json"
DEFAULT_QUERY_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class CatalogConfig:
    # Presence alone selects database mode; the value is handed to SQLAlchemy.
    database_url: Optional[str] = None
    fixture_path: Path = DEFAULT_FIXTURE_PATH
    query_timeout_seconds: float = DEFAULT_QUERY_TIMEOUT_SECONDS
    database_echo: bool = False

    @property
    def uses_database(self) -> bool:
        return self.database_url is not None


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _parse_timeout(value: Optional[str]) -> float:
    if value is None:
        return DEFAULT_QUERY_TIMEOUT_SECONDS
    try:
        timeout = float(value)
    except ValueError:
        return DEFAULT_QUERY_TIMEOUT_SECONDS
    return timeout if timeout > 0 else DEFAULT_QUERY_TIMEOUT_SECONDS


def get_config() -> CatalogConfig:
    """
    Centralized config: this is the ONLY place env vars are read.
    - Loads `.env` if present (local dev)
    - A blank DATABASE_URL counts as unset, so fixture mode kicks in
    """
    load_dotenv(override=False)

    fixture_path = _getenv("GALLERY_FIXTURE_PATH")
    return CatalogConfig(
        database_url=_getenv("DATABASE_URL"),
        fixture_path=Path(fixture_path) if fixture_path else DEFAULT_FIXTURE_PATH,
        query_timeout_seconds=_parse_timeout(_getenv("DATABASE_QUERY_TIMEOUT")),
        database_echo=(_getenv("DATABASE_ECHO", "false") or "false").lower() == "true",
    )


__all__ = ["CatalogConfig", "DEFAULT_FIXTURE_PATH", "get_config"]
