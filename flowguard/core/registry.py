from __future__ import annotations

import logging
import threading
from contextlib import contextmanager, suppress
from typing import Hashable, Iterator

from selenium.common.exceptions import WebDriverException
from urllib3.exceptions import HTTPError

from flowguard.config.schema import EnvironmentConfig
from flowguard.core.browser import BrowserFactory, BrowserProfile
from flowguard.core.session import Session

log = logging.getLogger(__name__)

# A crashed driver process surfaces as a raw connection error, not a WebDriverException.
DRIVER_GONE_ERRORS: tuple[type[BaseException], ...] = (WebDriverException, HTTPError, OSError)


class SessionRegistry:
    """Owns at most one live browser session per execution context."""

    def __init__(self, environment: EnvironmentConfig, factory=None) -> None:
        self.environment = environment
        self.factory = factory or BrowserFactory(environment)
        self._sessions: dict[Hashable, Session] = {}
        self._lock = threading.Lock()

    @staticmethod
    def current_context() -> Hashable:
        return threading.get_ident()

    def acquire(self, context: Hashable | None = None) -> Session:
        key = self.current_context() if context is None else context
        with self._lock:
            existing = self._sessions.get(key)
        if existing is not None:
            if self._is_alive(existing):
                return existing
            log.warning("Session %s for context %s stopped responding; replacing it", existing.session_id, key)
            self._forget(key)
            self._dispose(existing)
        session = self._create(key)
        with self._lock:
            self._sessions[key] = session
        return session

    def release(self, context: Hashable | None = None) -> None:
        key = self.current_context() if context is None else context
        session = self._forget(key)
        if session is not None:
            self._dispose(session)

    def release_all(self) -> None:
        for key in self.active_contexts():
            self.release(key)

    def active_contexts(self) -> list[Hashable]:
        with self._lock:
            return list(self._sessions)

    @contextmanager
    def session(self, context: Hashable | None = None) -> Iterator[Session]:
        key = self.current_context() if context is None else context
        try:
            yield self.acquire(key)
        finally:
            self.release(key)

    def _create(self, key: Hashable) -> Session:
        profile = BrowserProfile.parse(self.environment.browser)
        driver = self.factory.start(profile)
        try:
            driver.implicitly_wait(self.environment.implicit_wait)
            driver.set_page_load_timeout(self.environment.page_load_timeout)
            driver.maximize_window()
        except BaseException:
            with suppress(*DRIVER_GONE_ERRORS):
                driver.quit()
            raise
        session = Session(
            driver=driver,
            context=key,
            profile=profile.value,
            implicit_wait=self.environment.implicit_wait,
            explicit_wait=self.environment.explicit_wait,
            page_load_timeout=self.environment.page_load_timeout,
            window_state="maximized",
        )
        log.info("Started %s session %s for context %s", profile.value, session.session_id, key)
        return session

    def _forget(self, key: Hashable) -> Session | None:
        with self._lock:
            return self._sessions.pop(key, None)

    @staticmethod
    def _is_alive(session: Session) -> bool:
        try:
            session.driver.current_url
        except DRIVER_GONE_ERRORS:
            return False
        return True

    @staticmethod
    def _dispose(session: Session) -> None:
        try:
            session.quit()
            log.info("Closed session %s", session.session_id)
        except DRIVER_GONE_ERRORS as exc:
            log.warning("Error quitting driver for session %s: %s", session.session_id, exc)
