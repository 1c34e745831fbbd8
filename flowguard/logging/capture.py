from __future__ import annotations

import logging
import traceback
from pathlib import Path
from typing import Callable

from flowguard.core.metadata import FailureArtifactBundle
from flowguard.logging.artifacts import ArtifactManager

log = logging.getLogger(__name__)


def format_failure(error: BaseException | str | None) -> str:
    if error is None:
        return "Exception: <none recorded>\n"
    if isinstance(error, BaseException):
        details = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"Exception: {error}\n\nStack Trace:\n{details}"
    return f"Exception: {error}\n"


class FailureCapturePipeline:
    """Best-effort forensics for a failed test: screenshot, DOM and stack trace."""

    def __init__(self, artifact_manager: ArtifactManager) -> None:
        self.artifact_manager = artifact_manager

    def capture_on_failure(self, test_id: str, error, session=None) -> FailureArtifactBundle:
        timestamp = self.artifact_manager.timestamp()
        screenshot = self._guarded(
            "screenshot",
            test_id,
            lambda: self.artifact_manager.write_screenshot(test_id, self._require(session).screenshot_png(), timestamp),
        )
        dom_snapshot = self._guarded(
            "DOM snapshot",
            test_id,
            lambda: self.artifact_manager.write_dom_snapshot(test_id, self._require(session).page_source, timestamp),
        )
        stack_trace = self._guarded(
            "stack trace",
            test_id,
            lambda: self.artifact_manager.write_stack_trace(test_id, format_failure(error), timestamp),
        )
        bundle = FailureArtifactBundle(
            test_id=test_id,
            timestamp=timestamp,
            screenshot_path=screenshot,
            dom_snapshot_path=dom_snapshot,
            stack_trace_path=stack_trace,
        )
        log.error("Test failed: %s (%s); artifacts: %s", test_id, error, bundle.paths())
        return bundle

    @staticmethod
    def _require(session):
        if session is None:
            raise RuntimeError("no browser session attached")
        return session

    @staticmethod
    def _guarded(label: str, test_id: str, step: Callable[[], Path]) -> Path | None:
        try:
            return step()
        except Exception as exc:  # noqa: BLE001 - capture must never fail the test a second time.
            log.warning("Could not capture %s for %s: %s", label, test_id, exc)
            return None
