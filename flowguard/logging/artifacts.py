from __future__ import annotations

import re
import shutil
from datetime import datetime
from pathlib import Path

from flowguard.core.metadata import RunSummary

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ArtifactManager:
    """Creates and manages report artifact files."""

    def __init__(self, root: str | Path = "reports") -> None:
        self.root = Path(root)
        self.screenshot_root = self.root / "screenshots"
        self.dom_root = self.root / "dom_snapshots"
        self.stack_trace_root = self.root / "stack_traces"
        self.execution_log_path = self.root / "test-execution.log"
        self._ensure_structure()

    def _ensure_structure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.screenshot_root.mkdir(parents=True, exist_ok=True)
        self.dom_root.mkdir(parents=True, exist_ok=True)
        self.stack_trace_root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def timestamp() -> str:
        return datetime.now().strftime("%Y%m%d_%H%M%S")

    @staticmethod
    def artifact_name(test_id: str, timestamp: str, extension: str) -> str:
        safe_id = _UNSAFE_NAME_CHARS.sub("_", test_id).strip("_") or "test"
        return f"{safe_id}_{timestamp}.{extension}"

    def write_screenshot(self, test_id: str, png: bytes, timestamp: str | None = None) -> Path:
        path = self.screenshot_root / self.artifact_name(test_id, timestamp or self.timestamp(), "png")
        path.write_bytes(png)
        return path

    def write_dom_snapshot(self, test_id: str, page_source: str, timestamp: str | None = None) -> Path:
        path = self.dom_root / self.artifact_name(test_id, timestamp or self.timestamp(), "html")
        path.write_text(page_source, encoding="utf-8")
        return path

    def write_stack_trace(self, test_id: str, text: str, timestamp: str | None = None) -> Path:
        path = self.stack_trace_root / self.artifact_name(test_id, timestamp or self.timestamp(), "txt")
        path.write_text(text, encoding="utf-8")
        return path

    def write_run_summary(self, summary: RunSummary, timestamp: str | None = None) -> Path:
        stamp = timestamp or self.timestamp()
        finished = summary.finished_at or datetime.now()
        lines = [
            "Test Execution Summary",
            "======================",
            "",
            f"Suite: {summary.suite}",
            f"Start Time: {summary.started_at:%Y-%m-%d %H:%M:%S}",
            f"End Time: {finished:%Y-%m-%d %H:%M:%S}",
            f"Duration: {summary.duration_ms}ms",
            "",
            "Results:",
            f"- Passed: {summary.passed}",
            f"- Failed: {summary.failed}",
            f"- Skipped: {summary.skipped}",
            "",
        ]
        path = self.root / f"summary_{stamp}.txt"
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    def reset(self) -> Path:
        self._ensure_structure()
        for child in self.root.iterdir():
            if child.is_file() and child.name != ".gitkeep":
                child.unlink()
        for directory in (self.screenshot_root, self.dom_root, self.stack_trace_root):
            self._clear_directory(directory)
        return self.root

    @staticmethod
    def _clear_directory(directory: Path) -> None:
        for child in directory.iterdir():
            if child.is_dir():
                shutil.rmtree(child)
            elif child.is_file() and child.name != ".gitkeep":
                child.unlink()
