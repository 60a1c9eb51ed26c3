"""Cookie limit middleware package."""

from asgi_cookie_guard.cookie_limits.checker import CookieLimitChecker
from asgi_cookie_guard.cookie_limits.config import CookieLimitConfig
from asgi_cookie_guard.cookie_limits.domains import DomainResolver, TLDExtractLookup, is_ip_address
from asgi_cookie_guard.cookie_limits.errors import CookieLimitExceeded
from asgi_cookie_guard.cookie_limits.middleware import CookieLimitMiddleware, cookie_limit_middleware
from asgi_cookie_guard.cookie_limits.protocols import (
    CookieViolation,
    PublicSuffixLookup,
    ViolationHandler,
    ViolationKind,
)
from asgi_cookie_guard.cookie_limits.utils import normalize_header

__all__: tuple[str, ...] = (
    "CookieLimitMiddleware",
    "cookie_limit_middleware",
    "CookieLimitConfig",
    "CookieLimitChecker",
    "CookieLimitExceeded",
    "CookieViolation",
    "ViolationKind",
    "ViolationHandler",
    "DomainResolver",
    "PublicSuffixLookup",
    "TLDExtractLookup",
    "is_ip_address",
    "normalize_header",
)
