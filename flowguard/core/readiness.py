from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    WebDriverException,
)

from flowguard.core.exceptions import ReadinessTimeout
from flowguard.utils.wait import DEFAULT_POLL_INTERVAL, wait_until

log = logging.getLogger(__name__)

TRANSIENT_LOOKUP_ERRORS: tuple[type[BaseException], ...] = (
    NoSuchElementException,
    StaleElementReferenceException,
)

DOCUMENT_STATE_SCRIPT = "return document.readyState"

JQUERY_IDLE_SCRIPT = "return (typeof jQuery === 'undefined' || jQuery.active === 0);"

RESOURCE_TIMING_IDLE_SCRIPT = """
return window.performance.getEntriesByType('resource')
  .filter((entry) => entry.initiatorType === 'xmlhttprequest')
  .every((entry) => entry.duration > 0);
"""

RESOURCE_COUNT_SCRIPT = """
return window.performance.getEntriesByType('resource')
  .filter((entry) => entry.initiatorType === 'xmlhttprequest' || entry.initiatorType === 'fetch')
  .length;
"""

UNOBSCURED_SCRIPT = """
const element = arguments[0];
const rect = element.getBoundingClientRect();
const topmost = document.elementFromPoint(rect.left + rect.width / 2, rect.top + rect.height / 2);
return topmost === null || topmost === element || element.contains(topmost);
"""

Locator = tuple[str, str]


@dataclass(frozen=True, slots=True)
class ReadinessCondition:
    """A named predicate over the driver.

    A best-effort condition treats driver errors during evaluation as
    satisfied and never blocks the wait when it is still pending at the
    deadline.
    """

    name: str
    predicate: Callable[[object], bool]
    best_effort: bool = False
    ignored_exceptions: tuple[type[BaseException], ...] = TRANSIENT_LOOKUP_ERRORS

    def evaluate(self, driver) -> bool:
        try:
            return bool(self.predicate(driver))
        except self.ignored_exceptions:
            return False
        except WebDriverException as exc:
            if not self.best_effort:
                raise
            log.debug("Best-effort check '%s' errored (%s); treating as satisfied", self.name, exc.msg)
            return True

    def reset(self) -> None:
        """Clears per-wait state held by a stateful predicate."""

        reset = getattr(self.predicate, "reset", None)
        if callable(reset):
            reset()


class _AllOf:
    def __init__(self, members: tuple[ReadinessCondition, ...]) -> None:
        self.members = members

    def __call__(self, driver) -> bool:
        return all(condition.evaluate(driver) for condition in self.members)

    def reset(self) -> None:
        for condition in self.members:
            condition.reset()


def all_of(name: str, conditions: Iterable[ReadinessCondition]) -> ReadinessCondition:
    members = tuple(conditions)
    return ReadinessCondition(
        name=name,
        predicate=_AllOf(members),
        best_effort=all(condition.best_effort for condition in members),
        ignored_exceptions=(),
    )


def resource_timing_idle(driver) -> bool:
    """Idle when every XHR resource-timing entry reports a non-zero duration."""

    return bool(driver.execute_script(RESOURCE_TIMING_IDLE_SCRIPT))


class ResourceCountSettled:
    """Idle once the XHR/fetch resource-entry count is unchanged between two polls.

    The previous count is kept per thread and cleared by ``reset()`` at the
    start of every wait.
    """

    def __init__(self) -> None:
        self._state = threading.local()

    def reset(self) -> None:
        self._state.last_count = None

    def __call__(self, driver) -> bool:
        count = driver.execute_script(RESOURCE_COUNT_SCRIPT)
        last_count = getattr(self._state, "last_count", None)
        self._state.last_count = count
        return last_count is not None and count == last_count


def document_complete() -> ReadinessCondition:
    return ReadinessCondition(
        "document complete",
        lambda driver: driver.execute_script(DOCUMENT_STATE_SCRIPT) == "complete",
    )


def jquery_idle() -> ReadinessCondition:
    return ReadinessCondition(
        "jquery idle",
        lambda driver: bool(driver.execute_script(JQUERY_IDLE_SCRIPT)),
        best_effort=True,
        ignored_exceptions=(),
    )


def network_idle(strategy: Callable[[object], bool] = resource_timing_idle) -> ReadinessCondition:
    return ReadinessCondition("network idle", strategy, best_effort=True, ignored_exceptions=())


def default_page_conditions(
    network_strategy: Callable[[object], bool] = resource_timing_idle,
) -> tuple[ReadinessCondition, ...]:
    return (document_complete(), jquery_idle(), network_idle(network_strategy))


def resolve_element(driver, target):
    """Turns a locator, an ordered list of fallback locators, or an element into an element."""

    if isinstance(target, list):
        for by, value in target:
            matches = driver.find_elements(by, value)
            if matches:
                return matches[0]
        raise NoSuchElementException(f"No element matched any of {target}")
    if isinstance(target, tuple):
        return driver.find_element(*target)
    return target


def element_present(driver, target):
    return resolve_element(driver, target)


def element_visible(driver, target):
    element = resolve_element(driver, target)
    return element if element.is_displayed() else False


def element_interactable(driver, target):
    element = element_visible(driver, target)
    return element if element and element.is_enabled() else False


def is_unobscured(driver, element) -> bool:
    """False only when another element sits on top of ``element``'s centre."""

    return driver.execute_script(UNOBSCURED_SCRIPT, element) is not False


def element_clickable(driver, target):
    element = element_interactable(driver, target)
    return element if element and is_unobscured(driver, element) else False


class ReadinessDetector:
    """Gates interactions on page-level and element-level readiness."""

    def __init__(
        self,
        conditions: Sequence[ReadinessCondition] | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.conditions = tuple(conditions) if conditions is not None else default_page_conditions()
        self.poll_interval = poll_interval

    def await_ready(
        self,
        session,
        conditions: Sequence[ReadinessCondition] | None = None,
        timeout: float | None = None,
    ) -> None:
        checks = tuple(conditions) if conditions is not None else self.conditions
        duration = session.explicit_wait if timeout is None else timeout
        pending: list[ReadinessCondition] = []
        for condition in checks:
            condition.reset()

        def all_satisfied() -> bool:
            pending[:] = [condition for condition in checks if not condition.evaluate(session.driver)]
            return not pending

        try:
            wait_until(all_satisfied, duration, self.poll_interval, description="page readiness")
        except ReadinessTimeout:
            blocking = [condition.name for condition in pending if not condition.best_effort]
            if blocking:
                raise ReadinessTimeout(
                    f"Page not ready after {duration}s; pending: {', '.join(blocking)}"
                ) from None
            log.warning(
                "Best-effort readiness checks still pending after %ss: %s",
                duration,
                ", ".join(condition.name for condition in pending),
            )

    def await_element(self, session, condition, target, timeout: float | None = None):
        duration = session.explicit_wait if timeout is None else timeout
        return wait_until(
            lambda: condition(session.driver, target),
            duration,
            self.poll_interval,
            ignored_exceptions=TRANSIENT_LOOKUP_ERRORS,
            description=f"{condition.__name__.replace('_', ' ')} for {target!r}",
        )
