class FlowGuardError(RuntimeError):
    """Base class for terminal reliability-layer failures."""


class UnsupportedProfile(FlowGuardError):
    """Raised when a session is requested for an unknown browser profile."""


class ReadinessTimeout(FlowGuardError):
    """Raised when a page or element condition does not hold before the deadline."""


class InteractionFailed(FlowGuardError):
    """Raised once an interaction has exhausted its retries and the scripted fallback."""

    def __init__(self, description: str, last_error: BaseException, attempts: int) -> None:
        super().__init__(
            f"{description} failed after {attempts} attempt(s): "
            f"{type(last_error).__name__}: {last_error}"
        )
        self.description = description
        self.last_error = last_error
        self.attempts = attempts
