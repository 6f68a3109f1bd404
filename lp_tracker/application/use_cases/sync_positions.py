from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from lp_tracker.application.dto.sync import SyncCycleResult, SyncResult
from lp_tracker.application.mappers.candidate_mapper import (
    map_candidate_to_pool,
    map_candidate_to_position,
    map_candidate_to_swap,
)
from lp_tracker.application.ports.feed_schema_port import FeedSchemaPort
from lp_tracker.application.ports.position_feed_port import PositionFeedPort
from lp_tracker.application.ports.position_store_port import PositionStorePort
from lp_tracker.domain.exceptions import RecordParseError, StorageError


DEFAULT_LOOKBACK_SECONDS = 3600
logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _row_id(row: Any) -> str:
    if isinstance(row, dict) and row.get("id") is not None:
        return str(row["id"])
    return "<unknown>"


class SyncPositionsUseCase:
    """Pull recent positions and swaps from the feed into storage.

    Feed errors propagate and abort the cycle. Record-level parse and storage
    failures are logged, counted and skipped. Storage upserts are no-ops for
    known identities, so overlapping look-back windows are safe to replay.
    """

    def __init__(
        self,
        *,
        feed_port: PositionFeedPort,
        store_port: PositionStorePort,
        schema: FeedSchemaPort,
        lookback_seconds: int = DEFAULT_LOOKBACK_SECONDS,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._feed_port = feed_port
        self._store_port = store_port
        self._schema = schema
        self._lookback = timedelta(seconds=max(0, lookback_seconds))
        self._clock = clock

    def watermark(self) -> datetime:
        return self._clock() - self._lookback

    def sync_positions(self) -> SyncResult:
        return self._sync_recent_positions(None)

    def sync_owner_positions(self, owner: str) -> SyncResult:
        rows = self._feed_port.fetch_positions_by_owner(owner=owner)
        logger.info("sync_positions: fetched rows=%s owner=%s", len(rows), owner.lower())
        return self._ingest_positions(rows, source=f"owner:{owner.lower()}")

    def sync_pool_positions(self, pool_id: str) -> SyncResult:
        rows = self._feed_port.fetch_positions_by_pool(pool_id=pool_id)
        logger.info("sync_positions: fetched rows=%s pool=%s", len(rows), pool_id.lower())
        return self._ingest_positions(rows, source=f"pool:{pool_id.lower()}")

    def sync_swaps(self, pool_id: str) -> SyncResult:
        since = self.watermark()
        pool_key = pool_id.lower()
        rows = self._feed_port.fetch_recent_swaps(pool_id=pool_key, since=since)
        logger.info(
            "sync_swaps: fetched rows=%s pool=%s since=%s",
            len(rows),
            pool_key,
            since.isoformat(),
        )

        inserted = 0
        already_synced = 0
        failed = 0
        for row in rows:
            try:
                swap = map_candidate_to_swap(self._schema.to_swap_candidate(row))
                created = self._store_port.upsert_swap(swap)
            except (RecordParseError, StorageError) as exc:
                failed += 1
                logger.warning("sync_swaps: skip swap=%s pool=%s error=%s", _row_id(row), pool_key, exc)
                continue

            if created:
                inserted += 1
                logger.debug("sync_swaps: inserted swap=%s", swap.external_id)
            else:
                already_synced += 1

        result = SyncResult(
            fetched=len(rows),
            inserted=inserted,
            already_synced=already_synced,
            failed=failed,
        )
        logger.info(
            "sync_swaps: done pool=%s fetched=%s inserted=%s already_synced=%s failed=%s",
            pool_key,
            result.fetched,
            result.inserted,
            result.already_synced,
            result.failed,
        )
        return result

    def sync_all(self, pool_ids: Iterable[str] = ()) -> SyncCycleResult:
        """Run one cycle: recent positions, then swaps per pool.

        Swaps are synced for every pool seen in this cycle's positions plus
        the ``pool_ids`` already present in storage.
        """
        seen_pools: list[str] = []
        positions = self._sync_recent_positions(seen_pools)

        for pool_id in pool_ids:
            key = pool_id.lower()
            if key in seen_pools:
                continue
            # Swaps reference their pool; a pool no position has brought in yet cannot hold them.
            try:
                known = self._store_port.has_pool(key)
            except StorageError as exc:
                logger.warning("sync_all: pool_lookup_failed pool=%s error=%s", key, exc)
                continue
            if not known:
                logger.warning("sync_all: skip_unknown_pool pool=%s", key)
                continue
            seen_pools.append(key)

        swaps = {pool_id: self.sync_swaps(pool_id) for pool_id in seen_pools}
        return SyncCycleResult(positions=positions, swaps=swaps)

    def _sync_recent_positions(self, seen_pools: list[str] | None) -> SyncResult:
        since = self.watermark()
        rows = self._feed_port.fetch_recent_positions(since=since)
        logger.info(
            "sync_positions: fetched rows=%s since=%s schema=%s",
            len(rows),
            since.isoformat(),
            self._schema.version,
        )
        return self._ingest_positions(rows, source="recent", seen_pools=seen_pools)

    def _ingest_positions(
        self,
        rows: list[dict[str, Any]],
        *,
        source: str,
        seen_pools: list[str] | None = None,
    ) -> SyncResult:
        now = self._clock()
        inserted = 0
        already_synced = 0
        failed = 0

        for row in rows:
            record_id = _row_id(row)
            try:
                candidate = self._schema.to_position_candidate(row)
                pool = map_candidate_to_pool(candidate.pool, created_at=now)
            except RecordParseError as exc:
                failed += 1
                logger.warning("sync_positions: skip position=%s error=%s", record_id, exc)
                continue

            try:
                self._store_port.upsert_pool(pool)
            except StorageError as exc:
                failed += 1
                logger.warning(
                    "sync_positions: pool_upsert_failed pool=%s position=%s error=%s",
                    pool.pool_id,
                    record_id,
                    exc,
                )
                continue

            if seen_pools is not None and pool.pool_id not in seen_pools:
                seen_pools.append(pool.pool_id)

            try:
                position = map_candidate_to_position(candidate)
                created = self._store_port.upsert_position(position)
            except (RecordParseError, StorageError) as exc:
                failed += 1
                logger.warning("sync_positions: skip position=%s error=%s", record_id, exc)
                continue

            if created:
                inserted += 1
                logger.debug("sync_positions: inserted position=%s", position.nft_id)
            else:
                already_synced += 1
                logger.debug("sync_positions: already_synced position=%s", position.nft_id)

        result = SyncResult(
            fetched=len(rows),
            inserted=inserted,
            already_synced=already_synced,
            failed=failed,
        )
        logger.info(
            "sync_positions: done source=%s fetched=%s inserted=%s already_synced=%s failed=%s",
            source,
            result.fetched,
            result.inserted,
            result.already_synced,
            result.failed,
        )
        return result
