from __future__ import annotations

import re
from datetime import datetime, timezone

from lp_tracker.application.dto.sync import PoolCandidate, PositionCandidate, SwapCandidate
from lp_tracker.domain.entities.pool import Pool
from lp_tracker.domain.entities.position import Position
from lp_tracker.domain.entities.swap import Swap
from lp_tracker.domain.exceptions import RecordParseError


UINT256_MAX = 2**256 - 1
INT256_MIN = -(2**255)
INT256_MAX = 2**255 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


def parse_int(value: str | int | None, *, field_name: str) -> int:
    if value is None:
        raise RecordParseError(f"Missing {field_name}.")
    if isinstance(value, bool):
        raise RecordParseError(f"Invalid {field_name}: {value!r}.")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise RecordParseError(f"Unsupported {field_name} type: {type(value).__name__}.")
    raw = value.strip()
    if not raw:
        raise RecordParseError(f"Empty {field_name}.")
    # int() also accepts "1_000" and non-ASCII digits.
    if _DECIMAL_INT.fullmatch(raw) is None:
        raise RecordParseError(f"Invalid {field_name}: {value!r}.")
    return int(raw, 10)


def parse_int32(value: str | int | None, *, field_name: str) -> int:
    parsed = parse_int(value, field_name=field_name)
    if not INT32_MIN <= parsed <= INT32_MAX:
        raise RecordParseError(f"{field_name} out of int32 range: {parsed}.")
    return parsed


def parse_uint256(value: str | int | None, *, field_name: str) -> int:
    parsed = parse_int(value, field_name=field_name)
    if not 0 <= parsed <= UINT256_MAX:
        raise RecordParseError(f"{field_name} out of uint256 range: {parsed}.")
    return parsed


def parse_int256(value: str | int | None, *, field_name: str) -> int:
    parsed = parse_int(value, field_name=field_name)
    if not INT256_MIN <= parsed <= INT256_MAX:
        raise RecordParseError(f"{field_name} out of int256 range: {parsed}.")
    return parsed


def parse_unix_timestamp(value: str | int | None, *, field_name: str = "timestamp") -> datetime:
    seconds = parse_int(value, field_name=field_name)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise RecordParseError(f"Invalid {field_name}: {seconds}.") from exc


def map_candidate_to_pool(candidate: PoolCandidate, *, created_at: datetime) -> Pool:
    return Pool(
        pool_id=candidate.pool_id.lower(),
        token0=candidate.token0.lower(),
        token1=candidate.token1.lower(),
        fee_tier=parse_int32(candidate.fee_tier, field_name="fee_tier"),
        tick_spacing=parse_int32(candidate.tick_spacing, field_name="tick_spacing"),
        created_at=created_at,
    )


def map_candidate_to_position(candidate: PositionCandidate) -> Position:
    tick_lower = parse_int32(candidate.tick_lower, field_name="tick_lower")
    tick_upper = parse_int32(candidate.tick_upper, field_name="tick_upper")
    if tick_lower >= tick_upper:
        raise RecordParseError(
            f"tick_lower must be lower than tick_upper: {tick_lower} >= {tick_upper}."
        )
    return Position(
        id=0,
        nft_id=candidate.external_id,
        owner=candidate.owner.lower(),
        pool_id=candidate.pool.pool_id.lower(),
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        liquidity=parse_uint256(candidate.liquidity, field_name="liquidity"),
        created_at=parse_unix_timestamp(candidate.timestamp),
    )


def map_candidate_to_swap(candidate: SwapCandidate) -> Swap:
    return Swap(
        id=0,
        external_id=candidate.external_id,
        tx_hash=candidate.tx_hash,
        pool_id=candidate.pool_id.lower(),
        amount0=parse_int256(candidate.amount0, field_name="amount0"),
        amount1=parse_int256(candidate.amount1, field_name="amount1"),
        timestamp=parse_unix_timestamp(candidate.timestamp),
    )
