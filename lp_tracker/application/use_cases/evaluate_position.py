from __future__ import annotations

from lp_tracker.application.dto.evaluate_position import (
    EvaluatePositionInput,
    EvaluatePositionOutput,
)
from lp_tracker.application.ports.position_history_port import PositionHistoryPort
from lp_tracker.domain.exceptions import PositionEvaluationInputError, PositionNotFoundError
from lp_tracker.domain.services.health import health_details, position_health
from lp_tracker.domain.services.pnl import position_pnl
from lp_tracker.domain.services.tick_math import (
    distance_to_range_edge,
    is_in_range,
    range_width_percent,
)


class EvaluatePositionUseCase:
    def __init__(self, *, position_history_port: PositionHistoryPort):
        self._position_history_port = position_history_port

    def execute(self, command: EvaluatePositionInput) -> EvaluatePositionOutput:
        if not command.nft_id.strip():
            raise PositionEvaluationInputError("nft_id is required.")
        if command.initial_price < 0 or command.current_price < 0:
            raise PositionEvaluationInputError("initial_price and current_price must be >= 0.")
        if command.gas_spent < 0:
            raise PositionEvaluationInputError("gas_spent must be >= 0.")

        position = self._position_history_port.get_position(nft_id=command.nft_id)
        if position is None:
            raise PositionNotFoundError("Position not found.")

        # Only swaps after the position was opened can have paid it fees.
        swaps = self._position_history_port.list_swaps(
            pool_id=position.pool_id,
            since=position.created_at,
        )

        pnl = position_pnl(
            position,
            swaps,
            command.initial_price,
            command.current_price,
            command.gas_spent,
        )
        return EvaluatePositionOutput(
            position=position,
            pnl=pnl,
            status=position_health(position, command.current_tick, pnl),
            in_range=is_in_range(command.current_tick, position.tick_lower, position.tick_upper),
            distance_to_edge=distance_to_range_edge(
                command.current_tick,
                position.tick_lower,
                position.tick_upper,
            ),
            range_width_percent=range_width_percent(position.tick_lower, position.tick_upper),
            swaps_count=len(swaps),
            details=health_details(position, command.current_tick, pnl),
        )
