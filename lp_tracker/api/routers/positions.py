from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from lp_tracker.api.deps import get_evaluate_position_use_case
from lp_tracker.api.schemas.positions import PositionHealthResponse, PositionPnLResponse
from lp_tracker.application.dto.evaluate_position import EvaluatePositionInput
from lp_tracker.application.use_cases.evaluate_position import EvaluatePositionUseCase
from lp_tracker.domain.exceptions import (
    PositionEvaluationInputError,
    PositionNotFoundError,
    StorageError,
)

router = APIRouter()


@router.get("/v1/positions/{nft_id}/health", response_model=PositionHealthResponse)
def get_position_health(
    nft_id: str,
    current_tick: int,
    initial_price: Decimal,
    current_price: Decimal,
    gas_spent: Decimal = Decimal("0"),
    use_case: EvaluatePositionUseCase = Depends(get_evaluate_position_use_case),
):
    try:
        result = use_case.execute(
            EvaluatePositionInput(
                nft_id=nft_id,
                current_tick=current_tick,
                initial_price=initial_price,
                current_price=current_price,
                gas_spent=gas_spent,
            )
        )
    except PositionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PositionEvaluationInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    position = result.position
    return PositionHealthResponse(
        nft_id=position.nft_id,
        owner=position.owner,
        pool_id=position.pool_id,
        tick_lower=position.tick_lower,
        tick_upper=position.tick_upper,
        liquidity=str(position.liquidity),
        status=result.status.value,
        in_range=result.in_range,
        distance_to_edge=result.distance_to_edge,
        range_width_percent=str(result.range_width_percent),
        swaps_count=result.swaps_count,
        pnl=PositionPnLResponse(
            fees_earned=str(result.pnl.fees_earned),
            impermanent_loss=str(result.pnl.impermanent_loss),
            gas_spent=str(result.pnl.gas_spent),
            net_pnl=str(result.pnl.net_pnl),
        ),
        details=result.details,
    )
