from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.position_pnl import PositionPnL
from lp_tracker.domain.entities.swap import Swap
from lp_tracker.domain.services.tick_math import tick_to_price


# Order-of-magnitude model: flat 0.3% fee tier and a fixed 1% share of the pool.
FEE_RATE = Decimal("0.003")
ASSUMED_POOL_SHARE = Decimal("0.01")

FULL_RANGE_TICK_WIDTH = 1_000_000
PRICE_EQUALITY_TOLERANCE = Decimal("0.0001")
FULL_RANGE_IL_FACTOR = Decimal("0.2")
FULL_RANGE_IL_CAP = Decimal("0.5")
CONCENTRATED_IL_FACTOR = Decimal("0.5")


def fees_earned(position: Position, swaps: Sequence[Swap]) -> Decimal:
    """Estimate fees from swap volume.

    Assumes the position was in range for every swap given and holds a fixed
    share of pool liquidity; no time-in-range or liquidity weighting.
    """
    _ = position
    if not swaps:
        return Decimal("0")

    total_volume = sum(abs(swap.amount0) + abs(swap.amount1) for swap in swaps)
    return Decimal(total_volume) * FEE_RATE * ASSUMED_POOL_SHARE


def impermanent_loss(
    position: Position,
    initial_price: Decimal,
    current_price: Decimal,
) -> Decimal:
    """Approximate IL as a fraction of the held value.

    Ranges wider than ``FULL_RANGE_TICK_WIDTH`` ticks are treated like v2
    liquidity; narrower ranges scale the price move down by the range width.
    """
    if initial_price == 0 or current_price == 0:
        return Decimal("0")

    price_move = abs(current_price - initial_price)
    tick_range = abs(position.tick_upper - position.tick_lower)

    if tick_range > FULL_RANGE_TICK_WIDTH:
        if price_move < PRICE_EQUALITY_TOLERANCE:
            return Decimal("0")
        price_change_pct = abs(price_move / initial_price)
        return min(price_change_pct * FULL_RANGE_IL_FACTOR, FULL_RANGE_IL_CAP)

    price_lower = tick_to_price(position.tick_lower)
    price_upper = tick_to_price(position.tick_upper)

    if price_move < PRICE_EQUALITY_TOLERANCE:
        return Decimal("0")

    price_change_pct = abs(price_move / initial_price)
    if price_lower == 0:
        return Decimal("0")

    range_width = (price_upper - price_lower) / price_lower
    il_factor = price_change_pct / (Decimal("1") + range_width)
    return il_factor * CONCENTRATED_IL_FACTOR


def net_pnl(fees: Decimal, il: Decimal, gas: Decimal) -> Decimal:
    return fees - il - gas


def position_pnl(
    position: Position,
    swaps: Sequence[Swap],
    initial_price: Decimal,
    current_price: Decimal,
    gas_spent: Decimal,
) -> PositionPnL:
    fees = fees_earned(position, swaps)
    il = impermanent_loss(position, initial_price, current_price)
    return PositionPnL(
        fees_earned=fees,
        impermanent_loss=il,
        gas_spent=gas_spent,
        net_pnl=net_pnl(fees, il, gas_spent),
    )
