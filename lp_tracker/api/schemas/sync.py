from __future__ import annotations

from pydantic import BaseModel, Field


class SyncCountsResponse(BaseModel):
    fetched: int
    inserted: int
    already_synced: int
    failed: int


class SyncResponse(BaseModel):
    positions: SyncCountsResponse
    swaps: dict[str, SyncCountsResponse] = Field(
        default_factory=dict,
        description="Swap sync counts keyed by pool id.",
    )
    swaps_inserted: int
