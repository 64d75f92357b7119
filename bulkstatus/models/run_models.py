"""BulkStatus — Batch Run Models."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UpdateOutcome(BaseModel):
    """Result of processing one identifier. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    success: bool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: int = 0


class RunSummary(BaseModel):
    """Aggregate of one batch run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    results: List[UpdateOutcome] = []

    def record(self, outcome: UpdateOutcome) -> None:
        self.results.append(outcome)
        self.total += 1
        if outcome.success:
            self.succeeded += 1
        else:
            self.failed += 1


class RunRequest(BaseModel):
    """Body of ``POST /runs``."""

    identifiers: Optional[List[str]] = None
