from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ExecutionLog:
    """Mirrors the ``flowguard`` logger into a plain-text execution log."""

    def __init__(self, path: str | Path, logger_name: str = "flowguard", level: int = logging.INFO) -> None:
        self.path = Path(path)
        self.logger = logging.getLogger(logger_name)
        self.level = level
        self._handler: logging.Handler | None = None
        self._previous_level = self.logger.level

    def open(self) -> ExecutionLog:
        if self._handler is not None:
            return self
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler.setLevel(self.level)
        self._previous_level = self.logger.level
        if self.logger.getEffectiveLevel() > self.level:
            self.logger.setLevel(self.level)
        self.logger.addHandler(handler)
        self._handler = handler
        return self

    def close(self) -> None:
        if self._handler is None:
            return
        self.logger.removeHandler(self._handler)
        self._handler.close()
        self.logger.setLevel(self._previous_level)
        self._handler = None

    def __enter__(self) -> ExecutionLog:
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
