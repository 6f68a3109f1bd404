from __future__ import annotations

import logging
import sys

from lp_tracker.api.deps import build_sync_use_case
from lp_tracker.core.config import get_settings
from lp_tracker.core.db import create_schema, get_engine
from lp_tracker.core.logging_config import setup_logging
from lp_tracker.infrastructure.clients.subgraph_client import SubgraphQueryError


logger = logging.getLogger("lp_tracker.sync")


def main() -> int:
    """Run one sync cycle and exit non-zero on fatal failure."""
    settings = get_settings()
    setup_logging(settings.log_level)

    if not settings.graph_api_url:
        logger.error("sync: missing_config name=GRAPH_API_URL")
        return 1
    if not settings.database_url:
        logger.error("sync: missing_config name=DATABASE_URL")
        return 1

    engine = get_engine(settings.database_url)
    create_schema(engine)

    try:
        use_case = build_sync_use_case(settings, engine)
    except ValueError as exc:
        logger.error("sync: invalid_config error=%s", exc)
        return 1

    logger.info(
        "sync: start schema=%s lookback_seconds=%s page_size=%s extra_pools=%s",
        settings.graph_schema_version,
        settings.sync_lookback_seconds,
        settings.sync_page_size,
        len(settings.sync_pool_ids),
    )
    try:
        result = use_case.sync_all(settings.sync_pool_ids)
    except SubgraphQueryError as exc:
        logger.error("sync: failed query=%s error=%s", exc.query_name, exc)
        return 1

    logger.info(
        "sync: completed positions_inserted=%s positions_failed=%s pools=%s swaps_inserted=%s",
        result.positions.inserted,
        result.positions.failed,
        len(result.swaps),
        result.swaps_inserted,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
