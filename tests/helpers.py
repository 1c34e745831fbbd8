from __future__ import annotations

import os
from urllib import error, request

import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException

from flowguard.core.session import Session


class FakeClock:
    """Stands in for the ``time`` module inside the waiting code."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _next_outcome(outcomes):
    """Consumes scripted outcomes in order; the last one repeats."""

    if isinstance(outcomes, list):
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
    else:
        outcome = outcomes
    if isinstance(outcome, BaseException):
        raise outcome
    if callable(outcome):
        return outcome()
    return outcome


class FakeElement:
    def __init__(
        self,
        name: str = "element",
        *,
        displayed: bool = True,
        enabled: bool = True,
        text: str = "",
        attributes: dict[str, str] | None = None,
        click_errors: list[BaseException] | None = None,
    ) -> None:
        self.name = name
        self.displayed = displayed
        self.enabled = enabled
        self.text = text
        self.attributes = dict(attributes or {})
        self.click_errors = list(click_errors or [])
        self.clicks = 0
        self.cleared = 0
        self.typed: list[str] = []

    def is_displayed(self) -> bool:
        return self.displayed

    def is_enabled(self) -> bool:
        return self.enabled

    def click(self) -> None:
        self.clicks += 1
        if self.click_errors:
            raise self.click_errors.pop(0)

    def clear(self) -> None:
        self.cleared += 1

    def send_keys(self, *values: str) -> None:
        self.typed.append("".join(values))

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeDriver:
    """In-memory WebDriver double driven by scripted outcomes."""

    def __init__(
        self,
        *,
        scripts: dict | None = None,
        elements: dict | None = None,
        collections: dict | None = None,
        page_source: str = "<html><body>fake</body></html>",
        screenshot: bytes = b"\x89PNG fake",
    ) -> None:
        self.scripts = dict(scripts or {})
        self.elements = dict(elements or {})
        self.collections = dict(collections or {})
        self._page_source = page_source
        self._screenshot = screenshot
        self.url = "about:blank"
        self.title = "Fake page"
        self.dead = False
        self.implicit_waits: list[float] = []
        self.implicit_wait_errors: dict[float, BaseException] = {}
        self.page_load_timeout: float | None = None
        self.maximized = False
        self.quit_calls = 0
        self.executed: list[tuple[str, tuple]] = []
        self.visited: list[str] = []

    @property
    def current_url(self) -> str:
        if self.dead:
            raise WebDriverException("session deleted because of page crash")
        return self.url

    @property
    def page_source(self) -> str:
        return _next_outcome(self._page_source)

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.url = url

    def get_screenshot_as_png(self) -> bytes:
        return _next_outcome(self._screenshot)

    def execute_script(self, script: str, *args):
        self.executed.append((script, args))
        for marker, outcomes in self.scripts.items():
            if marker in script:
                return _next_outcome(outcomes)
        return None

    def find_element(self, by: str, value: str):
        if (by, value) not in self.elements:
            raise NoSuchElementException(f"no element for {by}={value}")
        return _next_outcome(self.elements[(by, value)])

    def find_elements(self, by: str, value: str) -> list:
        if (by, value) in self.collections:
            matches = self.collections[(by, value)]
            if isinstance(matches, BaseException):
                raise matches
            return list(matches)
        try:
            return [self.find_element(by, value)]
        except NoSuchElementException:
            return []

    def implicitly_wait(self, seconds: float) -> None:
        self.implicit_waits.append(seconds)
        if seconds in self.implicit_wait_errors:
            raise self.implicit_wait_errors[seconds]

    def set_page_load_timeout(self, seconds: float) -> None:
        self.page_load_timeout = seconds

    def maximize_window(self) -> None:
        self.maximized = True

    def quit(self) -> None:
        self.quit_calls += 1

    def scripts_containing(self, marker: str) -> list[tuple[str, tuple]]:
        return [entry for entry in self.executed if marker in entry[0]]


class FakeBrowserFactory:
    def __init__(self, make_driver=FakeDriver) -> None:
        self.make_driver = make_driver
        self.started: list[tuple[str, FakeDriver]] = []

    def start(self, profile):
        driver = self.make_driver()
        self.started.append((profile.value, driver))
        return driver


def make_session(driver: FakeDriver | None = None, *, implicit_wait: float = 10, explicit_wait: float = 5) -> Session:
    return Session(
        driver=driver or FakeDriver(),
        context="test-context",
        profile="chrome",
        implicit_wait=implicit_wait,
        explicit_wait=explicit_wait,
        page_load_timeout=30,
    )


def require_reachable_base_url(suite_config) -> None:
    try:
        with request.urlopen(suite_config.environment.base_url, timeout=5):
            return
    except (error.URLError, TimeoutError) as exc:
        pytest.skip(f"Target site is not reachable at {suite_config.environment.base_url}: {exc}")


def require_live_run() -> None:
    if os.getenv("FLOWGUARD_LIVE", "").lower() not in {"1", "true", "yes"}:
        pytest.skip("Set FLOWGUARD_LIVE=1 to run workflows against the live site")
