from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from asgi_cookie_guard.protocol import HTTPRequestScope


class PublicSuffixLookup(Protocol):
    def registrable_domain(self, hostname: str) -> str | None:
        """
        Returns the registrable domain of ``hostname`` (e.g. ``example.com`` for
        ``foo.example.com``), or None when the suffix is unknown.
        """


class ViolationKind(Enum):
    TOTAL_COUNT = "Too many cookies"
    DOMAIN_COUNT = "Too many cookies for domain(s)"
    DOMAIN_BYTESIZE = "Too much cookie data for domain(s)"
    COOKIE_BYTESIZE = "Too much data for cookie(s)"


@dataclass(frozen=True, slots=True)
class CookieViolation:
    """
    A single tripped cookie limit.

    Attributes:
        kind (ViolationKind): Which check failed.
        offenders (tuple[str, ...]): Offending domains or cookie names, in the
            order they first appeared in the response. Empty for ``TOTAL_COUNT``.
        scope (HTTPRequestScope): The request the response belongs to.
    """

    kind: ViolationKind
    offenders: tuple[str, ...]
    scope: HTTPRequestScope = field(repr=False, compare=False)

    @property
    def message(self) -> str:
        if not self.offenders:
            return self.kind.value
        return f"{self.kind.value}: {', '.join(self.offenders)}"


ViolationHandler = Callable[[CookieViolation], bool]
"""Decides whether a violation is raised (truthy) or suppressed (falsy)."""
