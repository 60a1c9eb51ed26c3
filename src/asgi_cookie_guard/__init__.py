from asgi_cookie_guard.cookie_limits import (
    CookieLimitConfig,
    CookieLimitExceeded,
    CookieLimitMiddleware,
    CookieViolation,
    ViolationKind,
    cookie_limit_middleware,
)

__all__: tuple[str, ...] = (
    "CookieLimitMiddleware",
    "cookie_limit_middleware",
    "CookieLimitConfig",
    "CookieLimitExceeded",
    "CookieViolation",
    "ViolationKind",
)
