from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping

from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.swap import Swap


def _as_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    return int(Decimal(str(value)))


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def map_row_to_position(row: Mapping[str, Any]) -> Position:
    return Position(
        id=int(row["id"]),
        nft_id=row["nft_id"],
        owner=row["owner"],
        pool_id=row["pool_id"],
        tick_lower=int(row["tick_lower"]),
        tick_upper=int(row["tick_upper"]),
        liquidity=_as_int(row["liquidity"]),
        created_at=_as_utc(row["created_at"]),
    )


def map_row_to_swap(row: Mapping[str, Any]) -> Swap:
    return Swap(
        id=int(row["id"]),
        external_id=row["external_id"],
        tx_hash=row["tx_hash"],
        pool_id=row["pool_id"],
        amount0=_as_int(row["amount0"]),
        amount1=_as_int(row["amount1"]),
        timestamp=_as_utc(row["swapped_at"]),
    )
