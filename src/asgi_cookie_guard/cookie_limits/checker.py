"""Threshold evaluation for cookie limits."""

import logging
from collections.abc import Sequence
from logging import Logger

from asgi_cookie_guard.protocol import HTTPRequestScope

from asgi_cookie_guard.cookie_limits.accounting import (
    fold_request_cookies,
    over_limit,
    oversized_cookie_names,
    propagate_to_subdomains,
    tally_cookies,
)
from asgi_cookie_guard.cookie_limits.config import CookieLimitConfig
from asgi_cookie_guard.cookie_limits.domains import DomainResolver
from asgi_cookie_guard.cookie_limits.errors import CookieLimitExceeded
from asgi_cookie_guard.cookie_limits.protocols import CookieViolation, ViolationHandler, ViolationKind
from asgi_cookie_guard.cookie_limits.utils import get_header_values, parse_cookie_header, request_host


def always_raise(_violation: CookieViolation) -> bool:
    return True


class CookieLimitChecker:
    """Checks the cookies of one response against the configured limits.

    Checks run in a fixed order, count first and bytesize second. The first
    violation the handler lets through is raised as ``CookieLimitExceeded``;
    a violation the handler rejects is skipped and the next check runs.
    """

    __slots__ = ("config", "resolver", "handler", "logger")

    def __init__(
        self,
        config: CookieLimitConfig,
        resolver: DomainResolver | None = None,
        handler: ViolationHandler | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.config = config
        self.handler = handler or always_raise
        self.logger = logger or logging.getLogger("asgi_cookie_guard")
        # Simple mode never looks at domains, so it never needs the suffix list.
        self.resolver = resolver or (DomainResolver() if config.per_domain else None)

    def check(self, scope: HTTPRequestScope, cookies: Sequence[str]) -> None:
        if self.config.per_domain:
            self._check_per_domain(scope, cookies)
        else:
            self._check_simple(scope, cookies)

    def _check_simple(self, scope: HTTPRequestScope, cookies: Sequence[str]) -> None:
        limit, bytesize_limit, overhead = self.config.limit, self.config.bytesize_limit, self.config.overhead

        if limit >= 0 and len(cookies) > limit:
            self._report(scope, ViolationKind.TOTAL_COUNT)

        if bytesize_limit >= 0 and (names := oversized_cookie_names(cookies, bytesize_limit, overhead)):
            self._report(scope, ViolationKind.COOKIE_BYTESIZE, names)

    def _check_per_domain(self, scope: HTTPRequestScope, cookies: Sequence[str]) -> None:
        assert self.resolver is not None, "per-domain checks need a DomainResolver"
        config = self.config
        host = request_host(scope, trust_forwarded_host=config.trust_forwarded_host)

        # Cookies without a Domain attribute count against the host's registrable domain.
        default_bucket = self.resolver.registrable_domain(host)
        tally = tally_cookies(
            cookies, default_bucket, self.resolver, overhead=config.overhead, track_names=config.stateful
        )

        if config.stateful:
            fold_request_cookies(
                tally,
                parse_cookie_header(get_header_values(scope["headers"], b"cookie")),
                host,
                self.resolver,
                overhead=config.overhead,
                path=scope.get("root_path") or "/",
                secure=scope.get("scheme") == "https",
            )

        if config.strict:
            propagate_to_subdomains(tally.count, self.resolver)
            propagate_to_subdomains(tally.bytesize, self.resolver)

        if config.limit >= 0 and (domains := over_limit(tally.count, config.limit)):
            self._report(scope, ViolationKind.DOMAIN_COUNT, domains)

        if config.bytesize_limit >= 0 and (domains := over_limit(tally.bytesize, config.bytesize_limit)):
            self._report(scope, ViolationKind.DOMAIN_BYTESIZE, domains)

    def _report(self, scope: HTTPRequestScope, kind: ViolationKind, offenders: Sequence[str] = ()) -> None:
        violation = CookieViolation(kind=kind, offenders=tuple(offenders), scope=scope)

        if not self.handler(violation):
            self.logger.debug("Cookie limit violation suppressed by handler: %s", violation.message)
            return

        self.logger.warning(
            "Cookie limit exceeded for %s %s: %s",
            scope.get("method"),
            scope.get("path"),
            violation.message,
        )
        raise CookieLimitExceeded(violation)
