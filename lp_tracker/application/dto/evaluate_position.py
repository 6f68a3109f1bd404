from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.position_pnl import HealthStatus, PositionPnL


@dataclass(frozen=True)
class EvaluatePositionInput:
    nft_id: str
    current_tick: int
    initial_price: Decimal
    current_price: Decimal
    gas_spent: Decimal = Decimal("0")


@dataclass(frozen=True)
class EvaluatePositionOutput:
    position: Position
    pnl: PositionPnL
    status: HealthStatus
    in_range: bool
    distance_to_edge: int
    range_width_percent: Decimal
    swaps_count: int
    details: str
