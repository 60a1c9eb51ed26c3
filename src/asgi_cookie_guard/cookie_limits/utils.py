"""Utility functions for cookie limit checks."""

import re
from collections.abc import Iterable, Sequence

from asgi_cookie_guard.protocol import HTTPRequestScope

HEADER_SEP_RE = re.compile(r"\r?\n|\0")
DOMAIN_RE = re.compile(r";\s*domain=([^;]*)", re.IGNORECASE)
FORWARDED_SEP_RE = re.compile(r"[,\s]+")


def normalize_header(value: str | Sequence[str] | None) -> list[str]:
    """Split a raw ``Set-Cookie`` value into individual cookie directives.

    Accepts a single string (possibly holding several directives separated by
    newlines or NUL bytes), a sequence of such strings, or None. Blank
    segments are dropped and order is preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]

    return [segment for item in value for segment in HEADER_SEP_RE.split(item) if segment.strip()]


def cookie_name(directive: str) -> str:
    return directive.partition("=")[0].strip()


def domain_attribute(directive: str) -> str | None:
    """Return the case-folded ``Domain=`` attribute of a directive, if any."""
    match = DOMAIN_RE.search(directive)
    if match is None:
        return None

    # RFC 6265 5.2.3: a leading dot is ignored
    domain = match.group(1).strip().removeprefix(".")
    return domain.casefold() or None


def byte_length(directive: str) -> int:
    """Number of bytes the directive takes up in the response header.

    Header values travel as latin-1, anything outside it is measured as UTF-8.
    """
    try:
        return len(directive.encode("latin-1"))
    except UnicodeEncodeError:
        return len(directive.encode("utf-8"))


def get_header_values(headers: Iterable[tuple[bytes, bytes]], name: bytes) -> list[str]:
    """Collect every value of a header, decoded as latin-1."""
    return [value.decode("latin-1") for key, value in headers if key.lower() == name]


def parse_cookie_header(values: Iterable[str]) -> list[tuple[str, str]]:
    """Parse ``Cookie`` request header values into (name, value) pairs."""
    cookies: list[tuple[str, str]] = []

    for value in values:
        for chunk in value.split(";"):
            name, sep, cookie_value = chunk.partition("=")
            name = name.strip()
            if not sep or not name:
                continue
            cookies.append((name, cookie_value.strip()))

    return cookies


def strip_port(host_with_port: str) -> str:
    if host_with_port.startswith("["):
        end = host_with_port.find("]")
        return host_with_port[1:end] if end != -1 else host_with_port[1:]

    # a bare IPv6 literal carries no port
    if host_with_port.count(":") > 1:
        return host_with_port

    return host_with_port.partition(":")[0]


def request_host(scope: HTTPRequestScope, *, trust_forwarded_host: bool = True) -> str:
    """Resolve the host the request was addressed to, without its port.

    Looks at ``X-Forwarded-Host`` (last entry), then ``Host``, then the
    server address from the scope.
    """
    headers: dict[bytes, bytes] = {key.lower(): value for key, value in scope["headers"]}

    forwarded_hosts: list[str] = []
    if trust_forwarded_host and (forwarded_header := headers.get(b"x-forwarded-host")):
        forwarded_hosts = [entry for entry in FORWARDED_SEP_RE.split(forwarded_header.decode("latin-1")) if entry]

    if forwarded_hosts:
        host = strip_port(forwarded_hosts[-1])
    elif host_header := headers.get(b"host"):
        host = strip_port(host_header.decode("latin-1").strip())
    else:
        server = scope.get("server")
        host = server[0] if server else ""

    return host.casefold()
