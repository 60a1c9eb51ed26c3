import ipaddress

import tldextract

from asgi_cookie_guard.cookie_limits.protocols import PublicSuffixLookup
from asgi_cookie_guard.cookie_limits.utils import domain_attribute


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


class TLDExtractLookup(PublicSuffixLookup):
    """Public suffix lookup backed by ``tldextract``.

    Uses the suffix list snapshot bundled with ``tldextract`` and never goes
    to the network. Private suffixes (e.g. ``github.io``) are handled the same
    way as any other host, only the ICANN section is consulted.
    """

    __slots__ = ("_extract",)

    def __init__(self, extractor: tldextract.TLDExtract | None = None) -> None:
        self._extract = extractor or tldextract.TLDExtract(
            suffix_list_urls=(),
            cache_dir=None,
            include_psl_private_domains=False,
        )
        # Load the suffix list now so no request pays for it.
        self._extract("example.com")

    def registrable_domain(self, hostname: str) -> str | None:
        extracted = self._extract(hostname)
        if extracted.domain and extracted.suffix:
            return f"{extracted.domain}.{extracted.suffix}"
        return None


class DomainResolver:
    """Maps hostnames to cookie buckets and to their registrable domains."""

    __slots__ = ("lookup",)

    def __init__(self, lookup: PublicSuffixLookup | None = None) -> None:
        self.lookup = lookup or TLDExtractLookup()

    def registrable_domain(self, hostname: str) -> str:
        """Return the registrable domain of ``hostname``.

        IP literals are never folded. Hosts the lookup knows nothing about
        (``localhost``, unknown suffixes) come back unchanged.
        """
        if is_ip_address(hostname):
            return hostname
        return self.lookup.registrable_domain(hostname) or hostname

    def bucket_key(self, directive: str, default_host: str) -> str:
        """Bucket a directive by its ``Domain=`` attribute, or the request host."""
        return domain_attribute(directive) or default_host
