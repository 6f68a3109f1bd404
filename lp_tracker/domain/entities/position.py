from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Position:
    id: int
    nft_id: str
    owner: str
    pool_id: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    created_at: datetime
