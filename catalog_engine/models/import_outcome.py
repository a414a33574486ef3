from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

"""Import result models.

ImportOutcome is the per-draft result of a batch run; ImportResult aggregates
them with timing data and renders the external report shape
``{total, success, failed, results}``.
"""


@dataclass(frozen=True)
class ImportOutcome:
    """Result of materializing one draft."""
    reference: str  # "Row N: <name>"
    success: bool
    created_id: Any = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"reference": self.reference, "success": self.success}
        if self.created_id is not None:
            data["productId"] = self.created_id
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class ImportResult:
    """Aggregated outcomes of one batch run, in draft order."""
    results: list[ImportOutcome] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def success(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.success

    @property
    def failures(self) -> list[ImportOutcome]:
        return [r for r in self.results if not r.success]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "success": self.success,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
