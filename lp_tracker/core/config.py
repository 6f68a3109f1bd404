from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str) -> tuple[str, ...]:
    value = _env(name)
    if not value:
        return ()
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    graph_api_url: str
    database_url: str
    graph_schema_version: str
    graph_request_timeout_seconds: float
    graph_max_retries: int
    sync_lookback_seconds: int
    sync_page_size: int
    sync_pool_ids: tuple[str, ...]
    log_level: str


def get_settings() -> Settings:
    return Settings(
        graph_api_url=_env("GRAPH_API_URL", ""),
        database_url=_env("DATABASE_URL", ""),
        graph_schema_version=_env("GRAPH_SCHEMA_VERSION", "v4"),
        graph_request_timeout_seconds=float(_env("GRAPH_REQUEST_TIMEOUT_SECONDS", "10")),
        graph_max_retries=int(_env("GRAPH_MAX_RETRIES", "3")),
        sync_lookback_seconds=int(_env("SYNC_LOOKBACK_SECONDS", "3600")),
        sync_page_size=int(_env("SYNC_PAGE_SIZE", "100")),
        sync_pool_ids=_csv("SYNC_POOL_IDS"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
