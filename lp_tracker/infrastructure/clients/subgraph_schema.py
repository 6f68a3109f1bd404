from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from lp_tracker.application.dto.sync import PoolCandidate, PositionCandidate, SwapCandidate
from lp_tracker.domain.exceptions import RecordParseError
from lp_tracker.infrastructure.clients import subgraph_queries as queries


SCHEMA_V3 = "v3"
SCHEMA_V4 = "v4"


def _field(row: Any, key: str, *, path: str) -> Any:
    if not isinstance(row, Mapping):
        raise RecordParseError(f"Expected an object at {path}, got {type(row).__name__}.")
    value = row.get(key)
    if value is None:
        raise RecordParseError(f"Missing field {path}.{key}.")
    return value


def _text(row: Any, key: str, *, path: str) -> str:
    return str(_field(row, key, path=path))


class SubgraphSchema(ABC):
    """Query documents and row mapping for one subgraph schema generation.

    The sync engine only ever sees the normalized candidates, so nothing
    downstream branches on the schema version.
    """

    version: str
    positions_field: str
    positions_by_owner_query: str
    positions_by_pool_query: str
    recent_positions_query: str
    recent_swaps_query: str = queries.RECENT_SWAPS
    swaps_field: str = "swaps"

    @abstractmethod
    def to_position_candidate(self, row: Any) -> PositionCandidate:
        ...

    def to_swap_candidate(self, row: Any) -> SwapCandidate:
        swap_id = _text(row, "id", path="swap")
        transaction = row.get("transaction") or {}
        if not isinstance(transaction, Mapping):
            raise RecordParseError(f"Expected an object at swap.transaction for swap {swap_id}.")

        timestamp = row.get("timestamp")
        if timestamp is None:
            timestamp = transaction.get("timestamp")
        if timestamp is None:
            raise RecordParseError(f"Missing timestamp for swap {swap_id}.")

        return SwapCandidate(
            external_id=swap_id,
            tx_hash=str(transaction.get("id") or swap_id),
            pool_id=_text(_field(row, "pool", path="swap"), "id", path="swap.pool"),
            amount0=_text(row, "amount0", path="swap"),
            amount1=_text(row, "amount1", path="swap"),
            timestamp=str(timestamp),
        )

    def _pool_candidate(self, pool: Any, *, fee_key: str) -> PoolCandidate:
        return PoolCandidate(
            pool_id=_text(pool, "id", path="pool"),
            token0=_text(_field(pool, "token0", path="pool"), "id", path="pool.token0"),
            token1=_text(_field(pool, "token1", path="pool"), "id", path="pool.token1"),
            fee_tier=_text(pool, fee_key, path="pool"),
            tick_spacing=_text(pool, "tickSpacing", path="pool"),
        )


class LegacyPositionsSchema(SubgraphSchema):
    version = SCHEMA_V3
    positions_field = "positions"
    positions_by_owner_query = queries.LEGACY_POSITIONS_BY_OWNER
    positions_by_pool_query = queries.LEGACY_POSITIONS_BY_POOL
    recent_positions_query = queries.LEGACY_RECENT_POSITIONS

    def to_position_candidate(self, row: Any) -> PositionCandidate:
        transaction = _field(row, "transaction", path="position")
        return PositionCandidate(
            external_id=_text(row, "id", path="position"),
            owner=_text(row, "owner", path="position"),
            pool=self._pool_candidate(_field(row, "pool", path="position"), fee_key="fee"),
            tick_lower=_text(row, "tickLower", path="position"),
            tick_upper=_text(row, "tickUpper", path="position"),
            liquidity=_text(row, "liquidity", path="position"),
            timestamp=_text(transaction, "timestamp", path="position.transaction"),
        )


class ModifyLiquiditiesSchema(SubgraphSchema):
    version = SCHEMA_V4
    positions_field = "modifyLiquidities"
    positions_by_owner_query = queries.EVENT_POSITIONS_BY_OWNER
    positions_by_pool_query = queries.EVENT_POSITIONS_BY_POOL
    recent_positions_query = queries.EVENT_RECENT_POSITIONS

    def to_position_candidate(self, row: Any) -> PositionCandidate:
        return PositionCandidate(
            external_id=_text(row, "id", path="modifyLiquidity"),
            owner=_text(row, "origin", path="modifyLiquidity"),
            pool=self._pool_candidate(_field(row, "pool", path="modifyLiquidity"), fee_key="feeTier"),
            tick_lower=_text(row, "tickLower", path="modifyLiquidity"),
            tick_upper=_text(row, "tickUpper", path="modifyLiquidity"),
            liquidity=_text(row, "amount", path="modifyLiquidity"),
            timestamp=_text(row, "timestamp", path="modifyLiquidity"),
        )


_SCHEMAS: dict[str, type[SubgraphSchema]] = {
    SCHEMA_V3: LegacyPositionsSchema,
    SCHEMA_V4: ModifyLiquiditiesSchema,
}


def get_schema_adapter(version: str) -> SubgraphSchema:
    key = (version or "").strip().lower()
    schema_cls = _SCHEMAS.get(key)
    if schema_cls is None:
        raise ValueError(f"Unsupported subgraph schema version: {version!r} (expected v3 or v4).")
    return schema_cls()
