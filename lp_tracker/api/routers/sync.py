from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_tracker.api.deps import get_sync_pool_ids, get_sync_use_case
from lp_tracker.api.schemas.sync import SyncCountsResponse, SyncResponse
from lp_tracker.application.dto.sync import SyncResult
from lp_tracker.application.use_cases.sync_positions import SyncPositionsUseCase
from lp_tracker.infrastructure.clients.subgraph_client import SubgraphQueryError

router = APIRouter()
logger = logging.getLogger(__name__)


def _counts(result: SyncResult) -> SyncCountsResponse:
    return SyncCountsResponse(
        fetched=result.fetched,
        inserted=result.inserted,
        already_synced=result.already_synced,
        failed=result.failed,
    )


@router.post("/v1/sync", response_model=SyncResponse)
def run_sync(
    use_case: SyncPositionsUseCase = Depends(get_sync_use_case),
    pool_ids: tuple[str, ...] = Depends(get_sync_pool_ids),
):
    try:
        result = use_case.sync_all(pool_ids)
    except SubgraphQueryError as exc:
        logger.warning("sync_router: feed_failed query=%s error=%s", exc.query_name, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return SyncResponse(
        positions=_counts(result.positions),
        swaps={pool_id: _counts(swaps) for pool_id, swaps in result.swaps.items()},
        swaps_inserted=result.swaps_inserted,
    )
