"""Cookie limit middleware implementation."""

from collections.abc import Callable
from logging import Logger
from typing import cast

from asgi_cookie_guard.protocol import ASGIApp, HTTPRequestScope, Message, Receive, Scope, Send
from asgi_cookie_guard.protocol import HTTPResponseStartMessage

from asgi_cookie_guard.cookie_limits.checker import CookieLimitChecker
from asgi_cookie_guard.cookie_limits.config import CookieLimitConfig
from asgi_cookie_guard.cookie_limits.domains import DomainResolver
from asgi_cookie_guard.cookie_limits.errors import CookieLimitExceeded
from asgi_cookie_guard.cookie_limits.protocols import ViolationHandler
from asgi_cookie_guard.cookie_limits.utils import get_header_values, normalize_header


class CookieLimitMiddleware:
    """ASGI middleware that rejects responses setting too many or too large cookies.

    Inspects the ``Set-Cookie`` headers of every HTTP response before it
    reaches the client and raises ``CookieLimitExceeded`` when a limit is
    exceeded, unless the handler decides otherwise. Responses within the
    limits are passed through untouched.

    Args:
        app: ASGI application to wrap
        config: Limits to enforce, defaults to ``CookieLimitConfig()``
        handler: Called with each violation; return False to let the response through
        resolver: Domain resolver, defaults to one backed by the bundled public suffix list
        logger: Logger for violations, defaults to the ``asgi_cookie_guard`` logger
    """

    __slots__ = ("app", "config", "checker")

    def __init__(
        self,
        app: ASGIApp,
        config: CookieLimitConfig | None = None,
        *,
        handler: ViolationHandler | None = None,
        resolver: DomainResolver | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.app = app
        self.config = config or CookieLimitConfig()
        self.checker = CookieLimitChecker(self.config, resolver=resolver, handler=handler, logger=logger)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        http_scope = cast(HTTPRequestScope, scope)
        error: CookieLimitExceeded | None = None

        async def send_checked(message: Message) -> None:
            nonlocal error

            # Frameworks may catch the error and try to render their own error page.
            if error is not None:
                return

            if message["type"] == "http.response.start":
                message = cast(HTTPResponseStartMessage, message)
                set_cookie = get_header_values(message.get("headers", []), b"set-cookie")

                if set_cookie:
                    try:
                        self.checker.check(http_scope, normalize_header(set_cookie))
                    except CookieLimitExceeded as e:
                        error = e
                        raise

            await send(message)

        await self.app(scope, receive, send_checked)

        if error is not None:
            raise error


def cookie_limit_middleware(
    config: CookieLimitConfig | None = None,
    *,
    handler: ViolationHandler | None = None,
    resolver: DomainResolver | None = None,
    logger: Logger | None = None,
) -> Callable[[ASGIApp], CookieLimitMiddleware]:
    """Create a cookie limit middleware factory function.

    The domain resolver is built once here and shared by every app the
    factory wraps.

    Returns:
        A function that takes an ASGI app and returns CookieLimitMiddleware
    """
    config = config or CookieLimitConfig()
    if resolver is None and config.per_domain:
        resolver = DomainResolver()

    def middleware_factory(app: ASGIApp) -> CookieLimitMiddleware:
        return CookieLimitMiddleware(app, config, handler=handler, resolver=resolver, logger=logger)

    return middleware_factory
