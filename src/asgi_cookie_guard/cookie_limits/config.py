"""Configuration classes for cookie limit middleware."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CookieLimitConfig:
    """Configuration for cookie limit middleware.

    Args:
        limit: Maximum number of cookies per domain (or in total when
            ``per_domain`` is off). Negative disables the check.
        bytesize_limit: Maximum bytes per domain (or per cookie when
            ``per_domain`` is off). Negative disables the check.
        overhead: Bytes added per cookie for directive bytes not present in
            the raw header value.
        per_domain: Bucket cookies by domain instead of checking them one by one.
        strict: Add a registrable domain's totals to each of its subdomains.
            Implies ``per_domain``.
        stateful: Fold the cookies the browser already sent into the totals.
            Implies ``strict``.
        trust_forwarded_host: Read the request host from ``X-Forwarded-Host``
            when present.
    """

    limit: int = 50
    bytesize_limit: int = 4096
    overhead: int = 3
    per_domain: bool = True
    strict: bool = False
    stateful: bool = False
    trust_forwarded_host: bool = True

    def __post_init__(self) -> None:
        if self.limit < 0 and self.bytesize_limit < 0:
            raise ValueError("At least one of [`limit`, `bytesize_limit`] must be non-negative")
        if self.overhead < 0:
            raise ValueError("overhead must be non-negative")

        if self.stateful:
            object.__setattr__(self, "strict", True)
        if self.strict:
            object.__setattr__(self, "per_domain", True)
