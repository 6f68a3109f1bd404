from __future__ import annotations

from typing import Any, Protocol

from lp_tracker.application.dto.sync import PositionCandidate, SwapCandidate


class FeedSchemaPort(Protocol):
    version: str

    def to_position_candidate(self, row: Any) -> PositionCandidate:
        ...

    def to_swap_candidate(self, row: Any) -> SwapCandidate:
        ...
