from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Swap:
    id: int
    external_id: str
    tx_hash: str
    pool_id: str
    amount0: int
    amount1: int
    timestamp: datetime
