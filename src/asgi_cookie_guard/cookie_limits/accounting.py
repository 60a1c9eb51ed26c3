"""Per-domain cookie accounting.

Totals are kept in plain dicts so iteration follows the order in which a
domain was first seen in the response; every reported list relies on that.
"""

import time
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from email.utils import formatdate

from asgi_cookie_guard.cookie_limits.domains import DomainResolver
from asgi_cookie_guard.cookie_limits.utils import byte_length, cookie_name

# Max-Age assumed for a request cookie whose Set-Cookie directive is unknown.
ASSUMED_MAX_AGE = 123456


@dataclass(slots=True)
class CookieTally:
    """Cookie count and bytesize per domain for a single response."""

    count: defaultdict[str, int] = field(default_factory=lambda: defaultdict(int))
    bytesize: defaultdict[str, int] = field(default_factory=lambda: defaultdict(int))
    names: defaultdict[str, set[str]] = field(default_factory=lambda: defaultdict(set))

    def add(self, key: str, directive: str, overhead: int) -> None:
        self.count[key] += 1
        self.bytesize[key] += byte_length(directive) + overhead


def tally_cookies(
    cookies: Iterable[str],
    default_host: str,
    resolver: DomainResolver,
    *,
    overhead: int,
    track_names: bool = False,
) -> CookieTally:
    """Bucket response cookies by domain and add up their counts and sizes."""
    tally = CookieTally()

    for directive in cookies:
        key = resolver.bucket_key(directive, default_host)
        tally.add(key, directive, overhead)
        if track_names:
            tally.names[key].add(cookie_name(directive))

    return tally


def estimate_directive(
    name: str,
    value: str,
    *,
    domain: str,
    path: str,
    secure: bool,
    now: float | None = None,
) -> str:
    """Reconstruct the largest ``Set-Cookie`` directive a request cookie could have come from."""
    parts = [
        f"{name}={value}",
        f"Domain={domain}",
        f"Path={path}",
        f"Max-Age={ASSUMED_MAX_AGE}",
        f"Expires={formatdate(time.time() if now is None else now, usegmt=True)}",
    ]
    if secure:
        parts.append("Secure")
    parts.extend(["HttpOnly", "SameSite=strict"])
    return "; ".join(parts)


def fold_request_cookies(
    tally: CookieTally,
    request_cookies: Iterable[tuple[str, str]],
    host: str,
    resolver: DomainResolver,
    *,
    overhead: int,
    path: str = "/",
    secure: bool = False,
) -> None:
    """Add the cookies the browser already holds to the request host's totals.

    Cookies the response sets again are skipped. The size of the rest is
    estimated from a worst-case directive, so this over-counts rather than
    under-counts: path scoping and the real attributes are unknown.
    """
    registrable_domain = resolver.registrable_domain(host)
    seen = tally.names.get(host, set()) | tally.names.get(registrable_domain, set())

    for name, value in request_cookies:
        if name in seen:
            continue
        directive = estimate_directive(name, value, domain=registrable_domain, path=path, secure=secure)
        tally.add(host, directive, overhead)


def propagate_to_subdomains(table: dict[str, int], resolver: DomainResolver) -> None:
    """Add each registrable domain's total to the totals of its subdomains.

    Only one level deep: ``a.b.example.com`` picks up ``example.com`` but not
    ``b.example.com``.
    """
    for key in table:
        registrable_domain = resolver.registrable_domain(key)
        if registrable_domain == key or registrable_domain not in table:
            continue
        table[key] += table[registrable_domain]


def over_limit(table: dict[str, int], limit: int) -> list[str]:
    return [key for key, value in table.items() if value > limit]


def oversized_cookie_names(cookies: Sequence[str], bytesize_limit: int, overhead: int) -> list[str]:
    """Distinct names of cookies bigger than the limit, in order of first appearance."""
    names = (cookie_name(directive) for directive in cookies if byte_length(directive) + overhead > bytesize_limit)
    return list(dict.fromkeys(names))
