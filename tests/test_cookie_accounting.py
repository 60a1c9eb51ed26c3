import pytest

from asgi_cookie_guard.cookie_limits.accounting import (
    CookieTally,
    estimate_directive,
    fold_request_cookies,
    over_limit,
    oversized_cookie_names,
    propagate_to_subdomains,
    tally_cookies,
)
from asgi_cookie_guard.cookie_limits.domains import DomainResolver
from asgi_cookie_guard.cookie_limits.utils import byte_length

SET_COOKIES = [
    "foo.bar=12345; Secure; HttpOnly; SameSite=strict",
    "bar.qux=67890; Secure; HttpOnly; SameSite=strict",
    "qux.foo=09876; Secure; HttpOnly; SameSite=strict",
    "foo.bar=12345; Domain=eXample.com",
    "bar.qux=67890; domain=exAmple.com",
    "qux.foo=09876; Domain=foo.example.com",
    "foo.bar=12345; Path=/; Domain=example.net; Expires=Sun, 26 Nov 2017 22:38:06 -0000",
]


class LastTwoLabelsLookup:
    def registrable_domain(self, hostname: str) -> str | None:
        labels = hostname.split(".")
        if len(labels) < 2:
            return None
        return ".".join(labels[-2:])


@pytest.fixture
def resolver() -> DomainResolver:
    return DomainResolver(LastTwoLabelsLookup())


class TestTallyCookies:
    def test_counts_and_sizes_per_domain(self, resolver):
        tally = tally_cookies(SET_COOKIES, "example.org", resolver, overhead=3)

        assert dict(tally.count) == {"example.org": 3, "example.com": 2, "foo.example.com": 1, "example.net": 1}
        assert dict(tally.bytesize) == {"example.org": 153, "example.com": 72, "foo.example.com": 40, "example.net": 85}

    def test_keys_in_order_of_first_appearance(self, resolver):
        cookies = ["a=1; Domain=b.example", "b=1", "c=1; Domain=a.example", "d=1; Domain=b.example"]

        tally = tally_cookies(cookies, "host.example", resolver, overhead=0)

        assert list(tally.count) == ["b.example", "host.example", "a.example"]

    def test_overhead_added_per_cookie(self, resolver):
        tally = tally_cookies(["a=b", "c=d"], "example.org", resolver, overhead=10)

        assert tally.bytesize["example.org"] == 26

    def test_names_only_tracked_on_request(self, resolver):
        untracked = tally_cookies(SET_COOKIES, "example.org", resolver, overhead=3)
        tracked = tally_cookies(SET_COOKIES, "example.org", resolver, overhead=3, track_names=True)

        assert dict(untracked.names) == {}
        assert dict(tracked.names) == {
            "example.org": {"foo.bar", "bar.qux", "qux.foo"},
            "example.com": {"foo.bar", "bar.qux"},
            "foo.example.com": {"qux.foo"},
            "example.net": {"foo.bar"},
        }

    def test_absent_domain_reads_as_zero(self):
        tally = CookieTally()

        assert tally.count["nowhere.example"] == 0
        assert tally.bytesize["nowhere.example"] == 0


class TestPropagateToSubdomains:
    def test_parent_added_to_subdomain(self, resolver):
        table = {"example.org": 3, "example.com": 2, "foo.example.com": 1, "example.net": 1}

        propagate_to_subdomains(table, resolver)

        assert table == {"example.org": 3, "example.com": 2, "foo.example.com": 3, "example.net": 1}

    def test_only_one_level(self, resolver):
        table = {"example.com": 1, "b.example.com": 2, "a.b.example.com": 4}

        propagate_to_subdomains(table, resolver)

        assert table == {"example.com": 1, "b.example.com": 3, "a.b.example.com": 5}

    def test_subdomain_without_parent_untouched(self, resolver):
        table = {"foo.example.com": 1, "bar.example.com": 2}

        propagate_to_subdomains(table, resolver)

        assert table == {"foo.example.com": 1, "bar.example.com": 2}

    def test_ip_addresses_untouched(self, resolver):
        table = {"10.0.0.1": 2, "0.1": 5}

        propagate_to_subdomains(table, resolver)

        assert table == {"10.0.0.1": 2, "0.1": 5}


class TestFoldRequestCookies:
    def test_estimate_directive(self):
        directive = estimate_directive("sid", "abc", domain="example.com", path="/", secure=False, now=0)

        assert directive == (
            "sid=abc; Domain=example.com; Path=/; Max-Age=123456; "
            "Expires=Thu, 01 Jan 1970 00:00:00 GMT; HttpOnly; SameSite=strict"
        )

    def test_estimate_directive_secure(self):
        directive = estimate_directive("sid", "abc", domain="example.com", path="/app", secure=True, now=0)

        assert directive.endswith("; Path=/app; Max-Age=123456; Expires=Thu, 01 Jan 1970 00:00:00 GMT; Secure; HttpOnly; SameSite=strict")

    def test_new_request_cookies_added_to_request_host(self, resolver):
        tally = tally_cookies(SET_COOKIES, "example.com", resolver, overhead=3, track_names=True)

        fold_request_cookies(tally, [("sid", "abc")], "www.example.com", resolver, overhead=3, secure=True)

        estimate = estimate_directive("sid", "abc", domain="example.com", path="/", secure=True, now=0)
        assert tally.count["www.example.com"] == 1
        assert tally.bytesize["www.example.com"] == byte_length(estimate) + 3
        assert tally.count["example.com"] == 5

    def test_cookies_set_by_response_skipped(self, resolver):
        cookies = ["host_only=1; Domain=www.example.com", "shared=1"]
        tally = tally_cookies(cookies, "example.com", resolver, overhead=3, track_names=True)

        fold_request_cookies(
            tally,
            [("host_only", "0"), ("shared", "0"), ("other", "0")],
            "www.example.com",
            resolver,
            overhead=3,
        )

        assert dict(tally.count) == {"www.example.com": 2, "example.com": 1}

    def test_request_host_bucket_created(self, resolver):
        tally = tally_cookies(["a=1; Domain=example.net"], "example.org", resolver, overhead=0, track_names=True)

        fold_request_cookies(tally, [("b", "2"), ("c", "3")], "example.org", resolver, overhead=0)

        assert list(tally.count.items()) == [("example.net", 1), ("example.org", 2)]


class TestLimits:
    def test_over_limit(self):
        table = {"a.example": 3, "b.example": 2, "c.example": 5}

        assert over_limit(table, 2) == ["a.example", "c.example"]
        assert over_limit(table, 5) == []

    @pytest.mark.parametrize(
        "bytesize_limit,overhead,expected",
        [
            (80, 3, ["foo.bar"]),
            (80, 40, ["foo.bar", "bar.qux", "qux.foo"]),
            (4096, 3, []),
            (0, 0, ["foo.bar", "bar.qux", "qux.foo"]),
        ],
    )
    def test_oversized_cookie_names(self, bytesize_limit, overhead, expected):
        assert oversized_cookie_names(SET_COOKIES, bytesize_limit, overhead) == expected
