from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PoolCandidate:
    pool_id: str
    token0: str
    token1: str
    fee_tier: str
    tick_spacing: str


@dataclass(frozen=True)
class PositionCandidate:
    external_id: str
    owner: str
    pool: PoolCandidate
    tick_lower: str
    tick_upper: str
    liquidity: str
    timestamp: str


@dataclass(frozen=True)
class SwapCandidate:
    external_id: str
    tx_hash: str
    pool_id: str
    amount0: str
    amount1: str
    timestamp: str


@dataclass(frozen=True)
class SyncResult:
    fetched: int
    inserted: int
    already_synced: int
    failed: int


@dataclass(frozen=True)
class SyncCycleResult:
    positions: SyncResult
    swaps: dict[str, SyncResult] = field(default_factory=dict)

    @property
    def swaps_inserted(self) -> int:
        return sum(result.inserted for result in self.swaps.values())
