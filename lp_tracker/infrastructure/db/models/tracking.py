from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from lp_tracker.core.db import Base


# SQLite only autoincrements INTEGER primary keys.
_ID = BigInteger().with_variant(Integer, "sqlite")


class PoolModel(Base):
    __tablename__ = "pools"

    pool_id: Mapped[str] = mapped_column(Text, primary_key=True)
    token0: Mapped[str] = mapped_column(Text, nullable=False)
    token1: Mapped[str] = mapped_column(Text, nullable=False)
    fee_tier: Mapped[int] = mapped_column(Integer, nullable=False)
    tick_spacing: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PositionModel(Base):
    __tablename__ = "positions"

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    nft_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    owner: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    pool_id: Mapped[str] = mapped_column(Text, ForeignKey("pools.pool_id"), nullable=False, index=True)
    tick_lower: Mapped[int] = mapped_column(Integer, nullable=False)
    tick_upper: Mapped[int] = mapped_column(Integer, nullable=False)
    liquidity: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SwapModel(Base):
    __tablename__ = "swaps"

    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    tx_hash: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    pool_id: Mapped[str] = mapped_column(Text, ForeignKey("pools.pool_id"), nullable=False, index=True)
    amount0: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False)
    amount1: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False)
    swapped_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
