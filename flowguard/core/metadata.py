from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FailureArtifactBundle:
    test_id: str
    timestamp: str
    screenshot_path: Path | None
    dom_snapshot_path: Path | None
    stack_trace_path: Path | None

    def paths(self) -> dict[str, str | None]:
        return {
            "screenshot": str(self.screenshot_path) if self.screenshot_path else None,
            "dom_snapshot": str(self.dom_snapshot_path) if self.dom_snapshot_path else None,
            "stack_trace": str(self.stack_trace_path) if self.stack_trace_path else None,
        }


@dataclass(slots=True)
class RunSummary:
    suite: str
    started_at: datetime
    finished_at: datetime | None = None
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def duration_ms(self) -> int:
        if self.finished_at is None:
            return 0
        return int((self.finished_at - self.started_at).total_seconds() * 1000)
