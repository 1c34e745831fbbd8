from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Hashable
from uuid import uuid4


@dataclass(slots=True)
class Session:
    """A live browser owned by exactly one execution context."""

    driver: Any
    context: Hashable
    profile: str
    implicit_wait: float
    explicit_wait: float
    page_load_timeout: float
    window_state: str = "normal"
    session_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def set_implicit_wait(self, seconds: float) -> None:
        self.driver.implicitly_wait(seconds)
        self.implicit_wait = seconds

    def navigate(self, url: str) -> None:
        self.driver.get(url)

    @property
    def current_url(self) -> str:
        return self.driver.current_url

    @property
    def page_source(self) -> str:
        return self.driver.page_source

    def screenshot_png(self) -> bytes:
        return self.driver.get_screenshot_as_png()

    def execute_script(self, script: str, *args):
        return self.driver.execute_script(script, *args)

    def quit(self) -> None:
        self.driver.quit()
