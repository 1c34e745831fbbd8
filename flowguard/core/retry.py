from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from flowguard.core.exceptions import FlowGuardError, InteractionFailed, ReadinessTimeout

log = logging.getLogger(__name__)

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    # element not ready
    NoSuchElementException,
    ElementNotInteractableException,
    ElementClickInterceptedException,
    StaleElementReferenceException,
    TimeoutException,
    ReadinessTimeout,
)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 0.5
    retryable: tuple[type[BaseException], ...] = RETRYABLE_ERRORS

    def delay_for(self, attempt: int) -> float:
        """Backoff slept after failed attempt number ``attempt`` (1-based)."""

        return attempt * self.base_delay


ELEMENT_RETRY_POLICY = RetryPolicy(max_attempts=3, base_delay=0.5)

# A failed test runs once more per rerun, so three runs in total.
TEST_RERUN_POLICY = RetryPolicy(max_attempts=3, base_delay=0.0)


def retry_call(operation, policy: RetryPolicy = ELEMENT_RETRY_POLICY, description: str = "operation"):
    """Runs ``operation`` under ``policy`` and returns its result.

    Retryable errors are retried with linear backoff; any other driver or
    reliability-layer error aborts at once. Both end in ``InteractionFailed``.
    """

    last_error: BaseException | None = None
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return operation()
        except policy.retryable as exc:
            last_error = exc
            if attempt < policy.max_attempts:
                delay = policy.delay_for(attempt)
                log.warning(
                    "%s attempt %d/%d failed (%s); retrying in %.1fs",
                    description,
                    attempt,
                    policy.max_attempts,
                    type(exc).__name__,
                    delay,
                )
                time.sleep(delay)
        except InteractionFailed:
            raise
        except (WebDriverException, FlowGuardError) as exc:
            log.error("%s failed with non-retryable %s", description, type(exc).__name__)
            raise InteractionFailed(description, exc, attempt) from exc
    log.error("%s exhausted %d attempts", description, policy.max_attempts)
    raise InteractionFailed(description, last_error, policy.max_attempts) from last_error
