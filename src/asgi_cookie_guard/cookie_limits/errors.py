from asgi_cookie_guard.cookie_limits.protocols import CookieViolation


class CookieLimitExceeded(RuntimeError):
    """Raised when a response sets more cookies, or more cookie data, than allowed."""

    def __init__(self, violation: CookieViolation) -> None:
        super().__init__(violation.message)
        self.violation = violation
