from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_CORS_ORIGINS = "http://127.0.0.1:3000,http://localhost:3000"
DEFAULT_MAX_PAGE_LIMIT = 1000


def _as_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _as_list(value: str) -> list[str]:
    return [x.strip() for x in value.split(",") if x.strip()]


@dataclass(frozen=True)
class CatalogSettings:
    cors_allow_origins: tuple[str, ...]
    max_page_limit: int
    log_level: str
    host: str
    port: int

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CatalogSettings":
        env = os.environ if environ is None else environ
        max_page_limit = _as_int(env.get("CATALOG_MAX_PAGE_LIMIT"), DEFAULT_MAX_PAGE_LIMIT)
        return cls(
            cors_allow_origins=tuple(_as_list(env.get("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS))),
            max_page_limit=max(1, max_page_limit),
            log_level=env.get("CATALOG_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            host=env.get("CATALOG_HOST", "127.0.0.1").strip() or "127.0.0.1",
            port=_as_int(env.get("CATALOG_PORT"), 3001),
        )
