from __future__ import annotations

import logging

from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException

from flowguard.config.schema import SuiteConfig
from flowguard.core.actions import InteractionExecutor
from flowguard.core.consent import ConsentHandler
from flowguard.core.finder import ElementFinder
from flowguard.core.readiness import ReadinessDetector, element_visible, resolve_element

log = logging.getLogger(__name__)


class BasePage:
    """Shared plumbing for page objects: readiness, interactions and consent."""

    landmark: str = ""

    def __init__(
        self,
        session,
        suite_config: SuiteConfig,
        detector: ReadinessDetector | None = None,
        consent: ConsentHandler | None = None,
    ) -> None:
        self.session = session
        self.suite_config = suite_config
        self.detector = detector or ReadinessDetector()
        self.actions = InteractionExecutor(session, self.detector)
        self.finder = ElementFinder(suite_config)
        self.consent = consent or ConsentHandler()

    def goto(self, page_class: type[BasePage]) -> BasePage:
        page = page_class(self.session, self.suite_config, self.detector, self.consent)
        page.wait_for_page_load()
        return page

    def wait_for_page_load(self) -> None:
        self.detector.await_ready(self.session)

    def accept_cookies_if_present(self) -> bool:
        return self.consent.dismiss_if_present(self.session)

    def wait_for_visible(self, element_key: str) -> None:
        self.detector.await_element(self.session, element_visible, self.finder.locators(element_key))

    def click(self, element_key: str) -> None:
        self.actions.click(self.finder.locators(element_key), name=element_key)

    def scroll_to(self, element_key: str) -> None:
        self.actions.scroll_to(self.finder.locators(element_key), name=element_key)

    def type(self, element_key: str, value: str) -> None:
        self.actions.type_text(self.finder.locators(element_key), value, name=element_key)

    def text_of(self, element_key: str) -> str:
        return self.actions.read_text(self.finder.locators(element_key), name=element_key)

    def is_displayed(self, element_key: str) -> bool:
        try:
            return resolve_element(self.session.driver, self.finder.locators(element_key)).is_displayed()
        except (NoSuchElementException, StaleElementReferenceException):
            return False

    def is_page_loaded(self) -> bool:
        return bool(self.landmark) and self.is_displayed(self.landmark)

    @property
    def title(self) -> str:
        return self.session.driver.title

    @property
    def current_url(self) -> str:
        return self.session.current_url
