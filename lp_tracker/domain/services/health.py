from __future__ import annotations

from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.position_pnl import HealthStatus, PositionPnL
from lp_tracker.domain.services.tick_math import distance_to_range_edge, is_in_range


def position_health(position: Position, current_tick: int, pnl: PositionPnL) -> HealthStatus:
    """Classify a position.

    Out of range or negative net P&L is critical; within 10% of the range
    width from an edge is a warning; anything else is healthy.
    """
    if not is_in_range(current_tick, position.tick_lower, position.tick_upper):
        return HealthStatus.CRITICAL

    if pnl.net_pnl < 0:
        return HealthStatus.CRITICAL

    distance = distance_to_range_edge(current_tick, position.tick_lower, position.tick_upper)
    range_width = position.tick_upper - position.tick_lower
    if distance < range_width // 10:
        return HealthStatus.WARNING

    return HealthStatus.HEALTHY


def health_details(position: Position, current_tick: int, pnl: PositionPnL) -> str:
    status = position_health(position, current_tick, pnl)
    in_range = is_in_range(current_tick, position.tick_lower, position.tick_upper)
    distance = distance_to_range_edge(current_tick, position.tick_lower, position.tick_upper)
    return (
        f"Status: {status.label}, In Range: {str(in_range).lower()}, "
        f"Distance to Edge: {distance}, Net P&L: {pnl.net_pnl}"
    )
