from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from lp_tracker.application.use_cases.evaluate_position import EvaluatePositionUseCase
from lp_tracker.application.use_cases.sync_positions import SyncPositionsUseCase
from lp_tracker.core.config import Settings, get_settings
from lp_tracker.core.db import create_schema, get_engine
from lp_tracker.infrastructure.clients.subgraph_client import (
    SubgraphFeedClient,
    SubgraphFeedClientSettings,
)
from lp_tracker.infrastructure.clients.subgraph_schema import get_schema_adapter
from lp_tracker.infrastructure.db.repositories.position_store_repository import (
    SqlPositionStoreRepository,
)


def build_sync_use_case(settings: Settings, engine) -> SyncPositionsUseCase:
    schema = get_schema_adapter(settings.graph_schema_version)
    feed_client = SubgraphFeedClient(
        SubgraphFeedClientSettings(
            graph_api_url=settings.graph_api_url,
            timeout_seconds=settings.graph_request_timeout_seconds,
            max_retries=settings.graph_max_retries,
            page_size=settings.sync_page_size,
        ),
        schema=schema,
    )
    return SyncPositionsUseCase(
        feed_port=feed_client,
        store_port=SqlPositionStoreRepository(engine),
        schema=schema,
        lookback_seconds=settings.sync_lookback_seconds,
    )


@lru_cache(maxsize=4)
def _get_prepared_engine(dsn: str):
    engine = get_engine(dsn)
    create_schema(engine)
    return engine


def _get_db_engine():
    settings = get_settings()
    if not settings.database_url:
        raise HTTPException(status_code=500, detail="DATABASE_URL is required.")
    return _get_prepared_engine(settings.database_url)


def get_sync_use_case() -> SyncPositionsUseCase:
    settings = get_settings()
    if not settings.graph_api_url:
        raise HTTPException(status_code=500, detail="GRAPH_API_URL is required.")
    try:
        return build_sync_use_case(settings, _get_db_engine())
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def get_sync_pool_ids() -> tuple[str, ...]:
    return get_settings().sync_pool_ids


def get_evaluate_position_use_case() -> EvaluatePositionUseCase:
    return EvaluatePositionUseCase(
        position_history_port=SqlPositionStoreRepository(_get_db_engine()),
    )
