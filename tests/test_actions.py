from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By

from flowguard.core.actions import SCRIPTED_CLICK, ActionKind, InteractionExecutor, InteractionRequest
from flowguard.core.exceptions import InteractionFailed, ReadinessTimeout
from flowguard.core.retry import ELEMENT_RETRY_POLICY, retry_call
from tests.helpers import FakeDriver, FakeElement, make_session

LOCATOR = (By.CSS_SELECTOR, "button[type='submit']")


def make_executor(element, scripts=None):
    driver = FakeDriver(elements={LOCATOR: element}, scripts=scripts)
    return InteractionExecutor(make_session(driver)), driver


def intercepted(times: int) -> list:
    return [ElementClickInterceptedException("consent banner would receive the click") for _ in range(times)]


def test_native_click_succeeds_without_fallback(fake_clock):
    element = FakeElement()
    executor, driver = make_executor(element)
    executor.click(LOCATOR, name="submit")
    assert element.clicks == 1
    assert driver.scripts_containing(SCRIPTED_CLICK) == []
    assert fake_clock.sleeps == []


def test_intercepted_click_falls_back_to_one_scripted_click(fake_clock):
    element = FakeElement(click_errors=intercepted(1))
    executor, driver = make_executor(element)
    executor.click(LOCATOR, name="submit")
    assert element.clicks == 1
    assert [args for _, args in driver.scripts_containing(SCRIPTED_CLICK)] == [(element,)]
    assert fake_clock.sleeps == []


def test_two_failed_native_clicks_then_successful_fallback_is_success(fake_clock):
    element = FakeElement(click_errors=intercepted(2))
    executor, driver = make_executor(
        element,
        scripts={SCRIPTED_CLICK: [StaleElementReferenceException("detached"), None]},
    )
    executor.click(LOCATOR, name="submit")
    assert element.clicks == 2
    assert len(driver.scripts_containing(SCRIPTED_CLICK)) == 2
    assert fake_clock.sleeps == [0.5]


def test_exhausted_click_surfaces_interaction_failed_with_linear_backoff(fake_clock):
    element = FakeElement(click_errors=intercepted(5))
    executor, driver = make_executor(
        element,
        scripts={SCRIPTED_CLICK: StaleElementReferenceException("detached")},
    )
    with pytest.raises(InteractionFailed) as excinfo:
        executor.click(LOCATOR, name="submit")
    assert element.clicks == 3
    assert fake_clock.sleeps == [0.5, 1.0]
    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.last_error, StaleElementReferenceException)
    assert "click on submit" in str(excinfo.value)


def test_non_retryable_error_aborts_on_first_occurrence(fake_clock):
    element = FakeElement(click_errors=[WebDriverException("chrome not reachable")])
    executor, driver = make_executor(element)
    with pytest.raises(InteractionFailed) as excinfo:
        executor.click(LOCATOR)
    assert element.clicks == 1
    assert excinfo.value.attempts == 1
    assert driver.scripts_containing(SCRIPTED_CLICK) == []
    assert fake_clock.sleeps == []


def test_element_that_never_becomes_clickable_is_retried_then_fails(fake_clock):
    element = FakeElement(displayed=False)
    executor, _ = make_executor(element)
    with pytest.raises(InteractionFailed) as excinfo:
        executor.click(LOCATOR, timeout=1)
    assert isinstance(excinfo.value.last_error, ReadinessTimeout)
    assert element.clicks == 0


def test_reads_wait_for_the_element(fake_clock):
    element = FakeElement(text="  Demandez votre Carte ", attributes={"href": "/fr-fr/apply"})
    executor, _ = make_executor(element)
    assert executor.read_text(LOCATOR) == "Demandez votre Carte"
    assert executor.read_attribute(LOCATOR, "href") == "/fr-fr/apply"


def test_scroll_is_followed_by_settle_delay(fake_clock):
    executor, driver = make_executor(FakeElement())
    executor.scroll_to(LOCATOR)
    assert len(driver.scripts_containing("scrollIntoView")) == 1
    assert fake_clock.sleeps == [0.5]


def test_type_clears_before_sending_keys(fake_clock):
    element = FakeElement()
    executor, _ = make_executor(element)
    executor.type_text(LOCATOR, "Dupont")
    assert element.cleared == 1
    assert element.typed == ["Dupont"]


def test_hover_moves_pointer_to_element(fake_clock, monkeypatch):
    moved = []

    class RecordingChains:
        def __init__(self, driver):
            self.driver = driver

        def move_to_element(self, element):
            moved.append(element)
            return self

        def perform(self):
            return None

    monkeypatch.setattr("flowguard.core.actions.ActionChains", RecordingChains)
    element = FakeElement()
    executor, _ = make_executor(element)
    executor.hover(LOCATOR)
    assert moved == [element]


def test_interaction_request_is_immutable():
    request = InteractionRequest(LOCATOR, ActionKind.CLICK)
    with pytest.raises(FrozenInstanceError):
        request.timeout = 3


def test_retry_call_returns_first_success(fake_clock):
    outcomes = [TimeoutException("page still loading"), "done"]

    def operation():
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert retry_call(operation, description="load") == "done"
    assert fake_clock.sleeps == [0.5]


def test_retry_delay_is_linear():
    assert [ELEMENT_RETRY_POLICY.delay_for(attempt) for attempt in (1, 2, 3)] == [0.5, 1.0, 1.5]


def test_programming_errors_are_not_wrapped(fake_clock):
    with pytest.raises(KeyError):
        retry_call(lambda: {}["missing"])
    assert fake_clock.sleeps == []


def test_covered_element_goes_straight_to_scripted_click(fake_clock):
    element = FakeElement()
    executor, driver = make_executor(element, scripts={"elementFromPoint": False})
    executor.click(LOCATOR, name="submit")
    assert element.clicks == 0
    assert [args for _, args in driver.scripts_containing(SCRIPTED_CLICK)] == [(element,)]
    assert fake_clock.sleeps == []
