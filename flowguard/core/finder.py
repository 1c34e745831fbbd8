from __future__ import annotations

from selenium.webdriver.common.by import By

from flowguard.config.schema import SuiteConfig
from flowguard.core.readiness import Locator


def infer_selector_type(selector: str) -> str:
    stripped = selector.strip()
    if stripped.startswith("/") or stripped.startswith("("):
        return "xpath"
    return "css"


class ElementFinder:
    """Maps configured element keys to ordered locator lists."""

    def __init__(self, suite_config: SuiteConfig) -> None:
        self.suite_config = suite_config

    def locators(self, element_key: str) -> list[Locator]:
        element_definition = self.suite_config.get_element(element_key)
        locators: list[Locator] = [(self._by(element_definition.selector_type), element_definition.selector)]
        for fallback in element_definition.fallback_selectors:
            locators.append((self._by(infer_selector_type(fallback)), fallback))
        return locators

    def find_all(self, driver, element_key: str) -> list:
        for by, selector in self.locators(element_key):
            matches = driver.find_elements(by, selector)
            if matches:
                return matches
        return []

    @staticmethod
    def _by(selector_type: str) -> str:
        return By.XPATH if selector_type == "xpath" else By.CSS_SELECTOR
