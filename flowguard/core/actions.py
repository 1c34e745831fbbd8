from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from selenium.common.exceptions import ElementClickInterceptedException
from selenium.webdriver.common.action_chains import ActionChains

from flowguard.core.readiness import (
    ReadinessDetector,
    element_interactable,
    element_present,
    element_visible,
    is_unobscured,
)
from flowguard.core.retry import ELEMENT_RETRY_POLICY, RetryPolicy, retry_call

log = logging.getLogger(__name__)

SCRIPTED_CLICK = "arguments[0].click();"
SCROLL_INTO_VIEW = "arguments[0].scrollIntoView({behavior: 'smooth', block: 'center'});"
SCROLL_SETTLE_SECONDS = 0.5


class ActionKind(str, Enum):
    CLICK = "click"
    HOVER = "hover"
    READ_TEXT = "read_text"
    READ_ATTRIBUTE = "read_attribute"
    SCROLL = "scroll"
    TYPE = "type"


@dataclass(frozen=True, slots=True)
class InteractionRequest:
    target: Any
    action: ActionKind
    value: str | None = None
    timeout: float | None = None
    name: str = "unnamed element"


def scripted_click(driver, element) -> None:
    """Clicks through the DOM, bypassing native hit-testing and overlays."""

    driver.execute_script(SCRIPTED_CLICK, element)


class InteractionExecutor:
    """Performs single interactions behind a readiness gate and a retry policy."""

    def __init__(
        self,
        session,
        detector: ReadinessDetector | None = None,
        policy: RetryPolicy = ELEMENT_RETRY_POLICY,
        scroll_settle: float = SCROLL_SETTLE_SECONDS,
    ) -> None:
        self.session = session
        self.detector = detector or ReadinessDetector()
        self.policy = policy
        self.scroll_settle = scroll_settle
        self._handlers = {
            ActionKind.CLICK: self._click,
            ActionKind.HOVER: self._hover,
            ActionKind.READ_TEXT: self._read_text,
            ActionKind.READ_ATTRIBUTE: self._read_attribute,
            ActionKind.SCROLL: self._scroll,
            ActionKind.TYPE: self._type,
        }

    def perform(self, request: InteractionRequest):
        handler = self._handlers[request.action]
        return retry_call(
            lambda: handler(request),
            self.policy,
            description=f"{request.action.value} on {request.name}",
        )

    def click(self, target, name: str = "unnamed element", timeout: float | None = None) -> None:
        self.perform(InteractionRequest(target, ActionKind.CLICK, timeout=timeout, name=name))

    def hover(self, target, name: str = "unnamed element", timeout: float | None = None) -> None:
        self.perform(InteractionRequest(target, ActionKind.HOVER, timeout=timeout, name=name))

    def read_text(self, target, name: str = "unnamed element", timeout: float | None = None) -> str:
        return self.perform(InteractionRequest(target, ActionKind.READ_TEXT, timeout=timeout, name=name))

    def read_attribute(
        self, target, attribute: str, name: str = "unnamed element", timeout: float | None = None
    ) -> str | None:
        return self.perform(
            InteractionRequest(target, ActionKind.READ_ATTRIBUTE, value=attribute, timeout=timeout, name=name)
        )

    def scroll_to(self, target, name: str = "unnamed element", timeout: float | None = None) -> None:
        self.perform(InteractionRequest(target, ActionKind.SCROLL, timeout=timeout, name=name))

    def type_text(
        self, target, value: str, name: str = "unnamed element", timeout: float | None = None
    ) -> None:
        self.perform(InteractionRequest(target, ActionKind.TYPE, value=value, timeout=timeout, name=name))

    def _await(self, request: InteractionRequest, condition):
        return self.detector.await_element(self.session, condition, request.target, request.timeout)

    def _click(self, request: InteractionRequest) -> None:
        element = self._await(request, element_interactable)
        try:
            # Covered elements go straight to the scripted click.
            if not is_unobscured(self.session.driver, element):
                raise ElementClickInterceptedException(f"{request.name} is covered by another element")
            element.click()
        except self.policy.retryable as exc:
            log.info("Native click on %s failed (%s); using scripted click", request.name, type(exc).__name__)
            scripted_click(self.session.driver, element)

    def _hover(self, request: InteractionRequest) -> None:
        element = self._await(request, element_visible)
        ActionChains(self.session.driver).move_to_element(element).perform()

    def _read_text(self, request: InteractionRequest) -> str:
        element = self._await(request, element_visible)
        return element.text.strip()

    def _read_attribute(self, request: InteractionRequest) -> str | None:
        element = self._await(request, element_present)
        return element.get_attribute(request.value)

    def _scroll(self, request: InteractionRequest) -> None:
        element = self._await(request, element_present)
        self.session.driver.execute_script(SCROLL_INTO_VIEW, element)
        time.sleep(self.scroll_settle)

    def _type(self, request: InteractionRequest) -> None:
        element = self._await(request, element_visible)
        element.clear()
        element.send_keys(request.value or "")
