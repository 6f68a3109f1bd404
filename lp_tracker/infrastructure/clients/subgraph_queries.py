from __future__ import annotations


# v3-style schema: one `positions` entity per NFT.

LEGACY_POSITIONS_BY_OWNER = """
query PositionsByOwner($owner: String!, $first: Int!) {
  positions(
    where: { owner: $owner }
    first: $first
  ) {
    id
    owner
    pool {
      id
      token0 { id }
      token1 { id }
      fee
      tickSpacing
    }
    tickLower
    tickUpper
    liquidity
    transaction {
      id
      timestamp
    }
  }
}
"""

LEGACY_POSITIONS_BY_POOL = """
query PositionsByPool($poolId: String!, $first: Int!) {
  positions(
    where: { pool: $poolId }
    first: $first
  ) {
    id
    owner
    pool {
      id
      token0 { id }
      token1 { id }
      fee
      tickSpacing
    }
    tickLower
    tickUpper
    liquidity
    transaction {
      id
      timestamp
    }
  }
}
"""

LEGACY_RECENT_POSITIONS = """
query RecentPositions($timestamp: BigInt!, $first: Int!) {
  positions(
    where: { transaction_: { timestamp_gte: $timestamp } }
    orderBy: transaction__timestamp
    orderDirection: desc
    first: $first
  ) {
    id
    owner
    pool {
      id
      token0 { id }
      token1 { id }
      fee
      tickSpacing
    }
    tickLower
    tickUpper
    liquidity
    transaction {
      id
      timestamp
    }
  }
}
"""


# v4-style schema: positions are reconstructed from `modifyLiquidities`
# events; only liquidity additions (amount > 0) are fetched.

EVENT_POSITIONS_BY_OWNER = """
query ModifyLiquidityByOrigin($owner: String!, $first: Int!) {
  modifyLiquidities(
    where: { origin: $owner, amount_gt: "0" }
    orderBy: timestamp
    orderDirection: desc
    first: $first
  ) {
    id
    timestamp
    pool {
      id
      token0 { id }
      token1 { id }
      feeTier
      tickSpacing
    }
    tickLower
    tickUpper
    amount
    origin
  }
}
"""

EVENT_POSITIONS_BY_POOL = """
query ModifyLiquidityByPool($poolId: String!, $first: Int!) {
  modifyLiquidities(
    where: { pool: $poolId, amount_gt: "0" }
    orderBy: timestamp
    orderDirection: desc
    first: $first
  ) {
    id
    timestamp
    pool {
      id
      token0 { id }
      token1 { id }
      feeTier
      tickSpacing
    }
    tickLower
    tickUpper
    amount
    origin
  }
}
"""

EVENT_RECENT_POSITIONS = """
query RecentModifyLiquidity($timestamp: BigInt!, $first: Int!) {
  modifyLiquidities(
    where: { timestamp_gte: $timestamp, amount_gt: "0" }
    orderBy: timestamp
    orderDirection: desc
    first: $first
  ) {
    id
    timestamp
    pool {
      id
      token0 { id }
      token1 { id }
      feeTier
      tickSpacing
    }
    tickLower
    tickUpper
    amount
    origin
  }
}
"""


# Swaps have the same shape in both schemas.

RECENT_SWAPS = """
query RecentSwaps($poolId: String!, $timestamp: BigInt!, $first: Int!) {
  swaps(
    where: { pool: $poolId, timestamp_gte: $timestamp }
    orderBy: timestamp
    orderDirection: asc
    first: $first
  ) {
    id
    timestamp
    transaction {
      id
      timestamp
    }
    pool {
      id
    }
    amount0
    amount1
  }
}
"""
