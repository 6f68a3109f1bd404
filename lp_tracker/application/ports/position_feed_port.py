from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol


class PositionFeedPort(Protocol):
    def fetch_positions_by_owner(self, *, owner: str) -> list[dict[str, Any]]:
        ...

    def fetch_positions_by_pool(self, *, pool_id: str) -> list[dict[str, Any]]:
        ...

    def fetch_recent_positions(self, *, since: datetime) -> list[dict[str, Any]]:
        ...

    def fetch_recent_swaps(self, *, pool_id: str, since: datetime) -> list[dict[str, Any]]:
        ...
