from __future__ import annotations

from datetime import datetime
from typing import Protocol

from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.swap import Swap


class PositionHistoryPort(Protocol):
    def get_position(self, *, nft_id: str) -> Position | None:
        ...

    def list_swaps(self, *, pool_id: str, since: datetime) -> list[Swap]:
        ...
