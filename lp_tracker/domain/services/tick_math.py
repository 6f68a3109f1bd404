from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow


TICK_BASE = Decimal("1.0001")
LN_TICK_BASE = TICK_BASE.ln()
MIN_PRICE = Decimal("1e-40")
MAX_PRICE = Decimal("1e40")


def is_in_range(current_tick: int, tick_lower: int, tick_upper: int) -> bool:
    return tick_lower <= current_tick < tick_upper


def distance_to_range_edge(current_tick: int, tick_lower: int, tick_upper: int) -> int:
    if not is_in_range(current_tick, tick_lower, tick_upper):
        return 0
    return min(current_tick - tick_lower, tick_upper - current_tick)


def tick_to_price(tick: int) -> Decimal:
    """Approximate ``1.0001 ** tick`` as ``exp(tick * ln(1.0001))``.

    The result is clamped to ``[MIN_PRICE, MAX_PRICE]`` so that full-range
    ticks (around +/-887220) and anything beyond stay finite.
    """
    try:
        price = (Decimal(tick) * LN_TICK_BASE).exp()
    except (Overflow, InvalidOperation):
        return MAX_PRICE if tick > 0 else MIN_PRICE
    if price > MAX_PRICE:
        return MAX_PRICE
    if price < MIN_PRICE:
        return MIN_PRICE
    return price


def price_to_tick(price: Decimal) -> int:
    price = Decimal(str(price))
    if price <= 0:
        return 0
    ratio = price.ln() / LN_TICK_BASE
    return int(ratio.to_integral_value(rounding=ROUND_HALF_UP))


def range_width_percent(tick_lower: int, tick_upper: int) -> Decimal:
    price_lower = tick_to_price(tick_lower)
    price_upper = tick_to_price(tick_upper)
    if price_lower == 0:
        return Decimal("0")
    return (price_upper - price_lower) / price_lower * Decimal("100")
