from __future__ import annotations

import logging
from enum import Enum

from selenium import webdriver
from selenium.webdriver import ChromeOptions, EdgeOptions, FirefoxOptions, SafariOptions

from flowguard.config.schema import EnvironmentConfig
from flowguard.core.exceptions import UnsupportedProfile

log = logging.getLogger(__name__)


class BrowserProfile(str, Enum):
    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    SAFARI = "safari"

    @classmethod
    def parse(cls, name: str) -> BrowserProfile:
        normalized = (name or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(profile.value for profile in cls)
            raise UnsupportedProfile(f"Unsupported browser: {name!r} (expected one of {supported})") from None


class BrowserFactory:
    """Creates browser instances using Selenium Manager."""

    def __init__(self, environment: EnvironmentConfig) -> None:
        self.environment = environment

    def options(self, profile: BrowserProfile):
        headless = self.environment.headless
        if profile is BrowserProfile.CHROME:
            options = ChromeOptions()
            options.add_argument("--start-maximized")
            options.add_argument("--disable-notifications")
            if headless:
                options.add_argument("--headless=new")
                options.add_argument("--window-size=1920,1080")
            return options
        if profile is BrowserProfile.FIREFOX:
            options = FirefoxOptions()
            if headless:
                options.add_argument("-headless")
            return options
        if profile is BrowserProfile.EDGE:
            options = EdgeOptions()
            if headless:
                options.add_argument("--headless=new")
            return options
        if headless:
            log.warning("Safari has no headless mode; starting a visible window")
        return SafariOptions()

    def start(self, profile: BrowserProfile):
        options = self.options(profile)
        log.info("Starting %s (headless=%s)", profile.value, self.environment.headless)
        if profile is BrowserProfile.CHROME:
            return webdriver.Chrome(options=options)
        if profile is BrowserProfile.FIREFOX:
            return webdriver.Firefox(options=options)
        if profile is BrowserProfile.EDGE:
            return webdriver.Edge(options=options)
        return webdriver.Safari(options=options)
