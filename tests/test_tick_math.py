from __future__ import annotations

from decimal import Decimal

from lp_tracker.domain.services.tick_math import (
    MAX_PRICE,
    MIN_PRICE,
    distance_to_range_edge,
    is_in_range,
    price_to_tick,
    range_width_percent,
    tick_to_price,
)


class TestTickMath:
    def test_is_in_range_is_half_open(self):
        assert is_in_range(100, 50, 150)
        assert is_in_range(50, 50, 150)
        assert not is_in_range(150, 50, 150)
        assert not is_in_range(30, 50, 150)
        assert not is_in_range(200, 50, 150)

    def test_upper_tick_is_never_in_range(self):
        for lower, upper in [(-1000, 1000), (0, 1), (-887220, 887220)]:
            assert not is_in_range(upper, lower, upper)
            assert is_in_range(upper - 1, lower, upper)

    def test_distance_to_range_edge(self):
        assert distance_to_range_edge(100, 50, 150) == 50
        assert distance_to_range_edge(75, 50, 150) == 25
        assert distance_to_range_edge(125, 50, 150) == 25
        assert distance_to_range_edge(50, 50, 150) == 0

    def test_distance_is_zero_out_of_range(self):
        assert distance_to_range_edge(30, 50, 150) == 0
        assert distance_to_range_edge(150, 50, 150) == 0
        assert distance_to_range_edge(200, 50, 150) == 0

    def test_tick_to_price_at_zero_is_one(self):
        assert abs(tick_to_price(0) - Decimal("1")) < Decimal("0.0001")

    def test_tick_to_price_direction(self):
        assert tick_to_price(100) > Decimal("1")
        assert tick_to_price(-100) < Decimal("1")

    def test_tick_to_price_matches_repeated_multiplication_for_small_ticks(self):
        expected = Decimal("1.0001") ** 10
        assert abs(tick_to_price(10) - expected) < Decimal("1e-20")

    def test_tick_to_price_is_strictly_increasing(self):
        ticks = [-887220, -500000, -1000, -1, 0, 1, 1000, 500000, 887220]
        prices = [tick_to_price(tick) for tick in ticks]
        assert all(left < right for left, right in zip(prices, prices[1:]))

    def test_extreme_ticks_are_finite_and_bounded(self):
        for tick in (-887272, -887220, 887220, 887272):
            price = tick_to_price(tick)
            assert price.is_finite()
            assert MIN_PRICE <= price <= MAX_PRICE

    def test_ticks_beyond_any_pool_are_clamped(self):
        assert tick_to_price(10**12) == MAX_PRICE
        assert tick_to_price(-(10**12)) == MIN_PRICE
        assert tick_to_price(5_000_000) == MAX_PRICE
        assert tick_to_price(-5_000_000) == MIN_PRICE

    def test_price_to_tick_inverts_tick_to_price_near_zero(self):
        for tick in (-50, -1, 0, 1, 50):
            assert price_to_tick(tick_to_price(tick)) == tick

    def test_price_to_tick_returns_zero_for_non_positive_price(self):
        assert price_to_tick(Decimal("0")) == 0
        assert price_to_tick(Decimal("-5")) == 0

    def test_range_width_percent(self):
        width = range_width_percent(0, 100)
        expected = (Decimal("1.0001") ** 100 - 1) * 100
        assert abs(width - expected) < Decimal("1e-15")
        assert range_width_percent(10, 10) == 0
