from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class PositionPnL:
    fees_earned: Decimal
    impermanent_loss: Decimal
    gas_spent: Decimal
    net_pnl: Decimal


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return self.value.capitalize()
