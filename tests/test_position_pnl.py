from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.swap import Swap
from lp_tracker.domain.services.pnl import (
    fees_earned,
    impermanent_loss,
    net_pnl,
    position_pnl,
)


NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _position(tick_lower: int = -1000, tick_upper: int = 1000) -> Position:
    return Position(
        id=1,
        nft_id="1",
        owner="0xtest",
        pool_id="0xpool",
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        liquidity=1_000_000,
        created_at=NOW,
    )


def _swap(amount0: int, amount1: int) -> Swap:
    return Swap(
        id=1,
        external_id="0xtx#1",
        tx_hash="0xtx",
        pool_id="0xpool",
        amount0=amount0,
        amount1=amount1,
        timestamp=NOW,
    )


class TestFeesEarned:
    def test_no_swaps_earn_nothing(self):
        assert fees_earned(_position(), []) == Decimal("0")

    def test_fees_use_absolute_volume_times_fee_rate_and_pool_share(self):
        swaps = [_swap(1000, -1000), _swap(-2000, 2000)]
        # volume 6000 * 0.003 * 0.01
        assert fees_earned(_position(), swaps) == Decimal("0.18")

    def test_fees_handle_wide_integer_amounts(self):
        swaps = [_swap(10**30, -(10**30))]
        fees = fees_earned(_position(), swaps)
        assert fees == Decimal(2 * 10**30) * Decimal("0.003") * Decimal("0.01")


class TestImpermanentLoss:
    def test_zero_price_gives_zero(self):
        assert impermanent_loss(_position(), Decimal("0"), Decimal("100")) == 0
        assert impermanent_loss(_position(), Decimal("100"), Decimal("0")) == 0

    def test_unchanged_price_gives_zero_for_concentrated_range(self):
        assert impermanent_loss(_position(), Decimal("100"), Decimal("100")) == 0

    def test_unchanged_price_gives_zero_for_full_range(self):
        position = _position(-887220, 887220)
        assert impermanent_loss(position, Decimal("100"), Decimal("100")) == 0

    def test_near_equal_prices_are_treated_as_unchanged(self):
        assert impermanent_loss(_position(), Decimal("1"), Decimal("1.00009")) == 0
        position = _position(-887220, 887220)
        assert impermanent_loss(position, Decimal("1"), Decimal("1.00009")) == 0

    def test_full_range_scales_price_change(self):
        position = _position(-887220, 887220)
        # 10% move * 0.2
        assert impermanent_loss(position, Decimal("100"), Decimal("110")) == Decimal("0.02")
        assert impermanent_loss(position, Decimal("100"), Decimal("90")) == Decimal("0.02")

    def test_full_range_is_capped_at_half(self):
        position = _position(-887220, 887220)
        assert impermanent_loss(position, Decimal("1"), Decimal("10")) == Decimal("0.5")

    def test_width_exactly_at_cutoff_uses_concentrated_formula(self):
        position = _position(-500000, 500000)
        il = impermanent_loss(position, Decimal("100"), Decimal("110"))
        assert Decimal("0") < il < Decimal("0.000001")

    def test_concentrated_range_divides_by_range_width(self):
        position = _position()
        il = impermanent_loss(position, Decimal("100"), Decimal("110"))

        price_lower = Decimal("1.0001") ** -1000
        price_upper = Decimal("1.0001") ** 1000
        range_width = (price_upper - price_lower) / price_lower
        expected = Decimal("0.1") / (1 + range_width) * Decimal("0.5")
        assert abs(il - expected) < Decimal("1e-20")

    def test_wider_range_means_less_loss(self):
        narrow = impermanent_loss(_position(-100, 100), Decimal("100"), Decimal("110"))
        wide = impermanent_loss(_position(-5000, 5000), Decimal("100"), Decimal("110"))
        assert narrow > wide > 0


class TestNetPnl:
    def test_net_pnl_is_fees_minus_il_minus_gas(self):
        assert net_pnl(Decimal("100"), Decimal("20"), Decimal("10")) == Decimal("70")

    def test_net_pnl_is_not_clamped(self):
        assert net_pnl(Decimal("1.5"), Decimal("2.25"), Decimal("0.5")) == Decimal("-1.25")

    def test_position_pnl_composes_parts(self):
        position = _position()
        swaps = [_swap(1000, 1000)]

        pnl = position_pnl(position, swaps, Decimal("100"), Decimal("105"), Decimal("5"))

        assert pnl.fees_earned == fees_earned(position, swaps)
        assert pnl.impermanent_loss == impermanent_loss(position, Decimal("100"), Decimal("105"))
        assert pnl.gas_spent == Decimal("5")
        assert pnl.net_pnl == pnl.fees_earned - pnl.impermanent_loss - Decimal("5")
