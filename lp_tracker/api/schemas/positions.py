from __future__ import annotations

from pydantic import BaseModel, Field


class PositionPnLResponse(BaseModel):
    fees_earned: str
    impermanent_loss: str
    gas_spent: str
    net_pnl: str


class PositionHealthResponse(BaseModel):
    nft_id: str
    owner: str
    pool_id: str
    tick_lower: int
    tick_upper: int
    liquidity: str
    status: str = Field(..., description="healthy, warning or critical.")
    in_range: bool
    distance_to_edge: int
    range_width_percent: str
    swaps_count: int
    pnl: PositionPnLResponse
    details: str
