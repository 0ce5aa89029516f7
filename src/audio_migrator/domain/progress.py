"""Batch progress models."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class BatchCounters:
    """Consistent snapshot of batch outcome counters."""

    total: int = 0
    completed: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.completed + self.failed

    @property
    def percent_complete(self) -> float | None:
        """Return processed ratio in percent when the batch is non-empty."""

        if self.total <= 0:
            return None
        ratio = (self.processed / self.total) * 100
        return max(0.0, min(100.0, round(ratio, 2)))

    def describe(self) -> str:
        """Render the progress line used in run logs."""

        percent = self.percent_complete
        percent_text = "-" if percent is None else f"{math.floor(percent + 0.5)}%"
        return (
            f"{self.processed}/{self.total} ({percent_text}) | "
            f"{self.completed} completed | {self.failed} failed"
        )


__all__ = ["BatchCounters"]
