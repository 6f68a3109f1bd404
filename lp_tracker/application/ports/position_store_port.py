from __future__ import annotations

from typing import Protocol

from lp_tracker.domain.entities.pool import Pool
from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.swap import Swap


class PositionStorePort(Protocol):
    def upsert_pool(self, pool: Pool) -> bool:
        ...

    def upsert_position(self, position: Position) -> bool:
        ...

    def upsert_swap(self, swap: Swap) -> bool:
        ...

    def has_pool(self, pool_id: str) -> bool:
        ...
