from __future__ import annotations

import logging
import time
from typing import Sequence

from selenium.webdriver.common.by import By

from flowguard.core.actions import scripted_click

log = logging.getLogger(__name__)

DEFAULT_CONSENT_SELECTORS: tuple[str, ...] = (
    "//button[contains(text(), 'Accepter')]",
    "//button[contains(text(), 'Accept')]",
    "//button[contains(@id, 'cookie-accept')]",
    "//button[contains(@class, 'cookie-consent')]",
    "//button[contains(@class, 'accept-cookies')]",
    "//div[contains(@id, 'consent')]//button[contains(@id, 'accept')]",
    "//div[contains(@class, 'cookie')]//button[contains(@class, 'accept')]",
)


class ConsentHandler:
    """Dismisses the first visible cookie/consent dialog, if any."""

    def __init__(
        self,
        selectors: Sequence[str] = DEFAULT_CONSENT_SELECTORS,
        probe_wait: float = 2,
        settle_delay: float = 1.0,
    ) -> None:
        self.selectors = tuple(selectors)
        self.probe_wait = probe_wait
        self.settle_delay = settle_delay

    def dismiss_if_present(self, session) -> bool:
        original_wait = session.implicit_wait
        try:
            session.set_implicit_wait(self.probe_wait)
            for selector in self.selectors:
                try:
                    if self._dismiss_first_visible(session, selector):
                        log.info("Dismissed consent dialog via %s", selector)
                        return True
                except Exception as exc:  # noqa: BLE001 - a broken pattern must not stop the scan.
                    log.debug("Consent selector %s failed: %s", selector, exc)
            return False
        except Exception as exc:  # noqa: BLE001 - a missing dialog is never a test failure.
            log.warning("Consent handling aborted: %s", exc)
            return False
        finally:
            try:
                session.set_implicit_wait(original_wait)
            except Exception as exc:  # noqa: BLE001
                log.warning("Could not restore implicit wait to %ss: %s", original_wait, exc)

    def _dismiss_first_visible(self, session, selector: str) -> bool:
        for candidate in session.driver.find_elements(By.XPATH, selector):
            if candidate.is_displayed():
                scripted_click(session.driver, candidate)
                time.sleep(self.settle_delay)
                return True
        return False
