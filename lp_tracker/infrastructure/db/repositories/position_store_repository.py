from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from lp_tracker.application.ports.position_history_port import PositionHistoryPort
from lp_tracker.application.ports.position_store_port import PositionStorePort
from lp_tracker.domain.entities.pool import Pool
from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.swap import Swap
from lp_tracker.domain.exceptions import StorageError
from lp_tracker.infrastructure.db.mappers.position_store_mapper import (
    map_row_to_position,
    map_row_to_swap,
)


logger = logging.getLogger(__name__)


class SqlPositionStoreRepository(PositionStorePort, PositionHistoryPort):
    """Insert-if-absent storage for pools, positions and swaps.

    Uniqueness on the natural key plus ``ON CONFLICT DO NOTHING`` makes every
    write idempotent; ``rowcount`` tells whether a new row was created.
    """

    def __init__(self, engine):
        self._engine = engine

    def upsert_pool(self, pool: Pool) -> bool:
        sql = text(
            """
            INSERT INTO pools (pool_id, token0, token1, fee_tier, tick_spacing, created_at)
            VALUES (:pool_id, :token0, :token1, :fee_tier, :tick_spacing, :created_at)
            ON CONFLICT (pool_id) DO NOTHING
            """
        ).bindparams(bindparam("created_at", type_=DateTime(timezone=True)))
        params = {
            "pool_id": pool.pool_id,
            "token0": pool.token0,
            "token1": pool.token1,
            "fee_tier": pool.fee_tier,
            "tick_spacing": pool.tick_spacing,
            "created_at": pool.created_at,
        }
        return self._insert(sql, params, entity="pool", key=pool.pool_id)

    def upsert_position(self, position: Position) -> bool:
        sql = text(
            """
            INSERT INTO positions (nft_id, owner, pool_id, tick_lower, tick_upper, liquidity, created_at)
            VALUES (:nft_id, :owner, :pool_id, :tick_lower, :tick_upper, :liquidity, :created_at)
            ON CONFLICT (nft_id) DO NOTHING
            """
        ).bindparams(bindparam("created_at", type_=DateTime(timezone=True)))
        params = {
            "nft_id": position.nft_id,
            "owner": position.owner,
            "pool_id": position.pool_id,
            "tick_lower": position.tick_lower,
            "tick_upper": position.tick_upper,
            "liquidity": position.liquidity,
            "created_at": position.created_at,
        }
        return self._insert(sql, params, entity="position", key=position.nft_id)

    def upsert_swap(self, swap: Swap) -> bool:
        sql = text(
            """
            INSERT INTO swaps (external_id, tx_hash, pool_id, amount0, amount1, swapped_at)
            VALUES (:external_id, :tx_hash, :pool_id, :amount0, :amount1, :swapped_at)
            ON CONFLICT (external_id) DO NOTHING
            """
        ).bindparams(bindparam("swapped_at", type_=DateTime(timezone=True)))
        params = {
            "external_id": swap.external_id,
            "tx_hash": swap.tx_hash,
            "pool_id": swap.pool_id,
            "amount0": swap.amount0,
            "amount1": swap.amount1,
            "swapped_at": swap.timestamp,
        }
        return self._insert(sql, params, entity="swap", key=swap.external_id)

    def has_pool(self, pool_id: str) -> bool:
        sql = text("SELECT 1 FROM pools WHERE pool_id = :pool_id LIMIT 1")
        try:
            with self._engine.connect() as conn:
                row = conn.execute(sql, {"pool_id": pool_id.lower()}).first()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to look up pool {pool_id}: {exc}") from exc
        return row is not None

    def get_position(self, *, nft_id: str) -> Position | None:
        sql = text(
            """
            SELECT id, nft_id, owner, pool_id, tick_lower, tick_upper, liquidity, created_at
            FROM positions
            WHERE nft_id = :nft_id
            LIMIT 1
            """
        ).columns(created_at=DateTime(timezone=True))
        try:
            with self._engine.connect() as conn:
                row = conn.execute(sql, {"nft_id": nft_id}).mappings().first()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load position {nft_id}: {exc}") from exc
        if row is None:
            return None
        return map_row_to_position(row)

    def list_swaps(self, *, pool_id: str, since: datetime) -> list[Swap]:
        sql = (
            text(
                """
                SELECT id, external_id, tx_hash, pool_id, amount0, amount1, swapped_at
                FROM swaps
                WHERE pool_id = :pool_id
                  AND swapped_at >= :since
                ORDER BY swapped_at ASC, id ASC
                """
            )
            .bindparams(bindparam("since", type_=DateTime(timezone=True)))
            .columns(swapped_at=DateTime(timezone=True))
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(sql, {"pool_id": pool_id.lower(), "since": since}).mappings().all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load swaps for pool {pool_id}: {exc}") from exc
        return [map_row_to_swap(row) for row in rows]

    def _insert(self, sql, params: dict, *, entity: str, key: str) -> bool:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(sql, params)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to upsert {entity} {key}: {exc}") from exc

        created = (result.rowcount or 0) > 0
        logger.debug(
            "position_store_repo: upsert entity=%s key=%s created=%s",
            entity,
            key,
            created,
        )
        return created
