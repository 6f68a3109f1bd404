from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Pool:
    pool_id: str
    token0: str
    token1: str
    fee_tier: int
    tick_spacing: int
    created_at: datetime
