from __future__ import annotations

import time

from flowguard.core.exceptions import ReadinessTimeout

DEFAULT_POLL_INTERVAL = 0.5


def wait_until(
    predicate,
    timeout: float,
    interval: float = DEFAULT_POLL_INTERVAL,
    ignored_exceptions: tuple[type[BaseException], ...] = (),
    description: str = "condition",
):
    """Polls a predicate until it returns a truthy value.

    Exceptions listed in ``ignored_exceptions`` count as an unsuccessful poll.
    The predicate is evaluated one last time at the deadline before
    ``ReadinessTimeout`` is raised, chained to the last ignored error.
    """

    deadline = time.monotonic() + timeout
    last_error: BaseException | None = None
    while True:
        try:
            result = predicate()
        except ignored_exceptions as exc:
            last_error = exc
            result = None
        if result:
            return result
        if time.monotonic() >= deadline:
            break
        time.sleep(interval)
    raise ReadinessTimeout(f"Timed out after {timeout}s waiting for {description}") from last_error
