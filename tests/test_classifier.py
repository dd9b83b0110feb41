import pytest

from origin_gate.matching.classifier import (
    candidate_shape,
    in_range,
    ip_equals,
    is_cidr,
    is_localhost_alias,
    is_loopback_ip,
    is_url_shaped,
    is_valid_ip,
    parse_as_url,
)


@pytest.mark.parametrize("value", [
    "::1",
    "127.0.0.1",
    "http://127.0.0.1",
    "localhost",
    "LOCALHOST",
    "http://localhost",
    "http://localhost:3000",
    "localhost:3000",
    "localhost:3000/app",
])
def test_localhost_aliases(value):
    assert is_localhost_alias(value)


@pytest.mark.parametrize("value", [
    "https://localhost",
    "127.0.0.2",
    "http://127.0.0.1:3000",
    "localhost.evil.com",
    "evil-localhost",
    "::2",
    "",
    None,
    1,
])
def test_not_localhost_aliases(value):
    assert not is_localhost_alias(value)


@pytest.mark.parametrize("value,expected", [
    ("10.0.0.1", True),
    ("::1", True),
    ("2001:db8::1", True),
    ("::ffff:127.0.0.1", True),
    ("10.0.0.256", False),
    ("10.0.0.0/8", False),
    ("example.com", False),
    ("http://10.0.0.1", False),
    ("", False),
    (None, False),
])
def test_is_valid_ip(value, expected):
    assert is_valid_ip(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("10.0.0.0/8", True),
    ("10.0.0.1/8", True),
    ("192.168.1.1/32", True),
    ("2001:db8::/32", True),
    ("10.0.0.0/33", False),
    ("10.0.0.0/255.0.0.0", False),
    ("10.0.0.0", False),
    ("foo/8", False),
    ("10.0.0.0/", False),
    (None, False),
])
def test_is_cidr(value, expected):
    assert is_cidr(value) is expected


@pytest.mark.parametrize("a,b,expected", [
    ("127.0.0.1", "127.0.0.1", True),
    ("127.0.0.1", "::ffff:127.0.0.1", True),
    ("::ffff:10.0.0.1", "10.0.0.1", True),
    ("::1", "0:0:0:0:0:0:0:1", True),
    ("10.0.0.1", "10.0.0.2", False),
    ("garbage", "10.0.0.1", False),
    ("10.0.0.1", None, False),
])
def test_ip_equals(a, b, expected):
    assert ip_equals(a, b) is expected


@pytest.mark.parametrize("value,expected", [
    ("127.0.0.1", True),
    ("::1", True),
    ("::ffff:127.0.0.1", True),
    ("127.0.0.2", False),
    ("10.0.0.1", False),
    ("localhost", False),
    ("", False),
])
def test_is_loopback_ip(value, expected):
    assert is_loopback_ip(value) is expected


@pytest.mark.parametrize("candidate,network,expected", [
    ("10.1.2.3", "10.0.0.0/8", True),
    ("::ffff:10.1.2.3", "10.0.0.0/8", False),
    ("::ffff:10.1.2.3", "::ffff:0:0/96", True),
    ("10.1.2.3", "::ffff:0:0/96", False),
    ("11.0.0.1", "10.0.0.0/8", False),
    ("2001:db8::1", "10.0.0.0/8", False),
    ("10.0.0.1", "2001:db8::/32", False),
    ("2001:db8::1", "2001:db8::/32", True),
    ("nope", "10.0.0.0/8", False),
    ("10.0.0.1", "not-a-range", False),
])
def test_in_range(candidate, network, expected):
    assert in_range(candidate, network) is expected


def test_parse_as_url_prepends_scheme_for_bare_localhost():
    url = parse_as_url("localhost:3000")
    assert url is not None
    assert url.scheme == "http"
    assert url.host == "localhost"
    assert url.port == 3000


def test_parse_as_url_keeps_explicit_scheme():
    url = parse_as_url("https://example.com/app")
    assert url is not None
    assert url.scheme == "https"
    assert url.host == "example.com"


@pytest.mark.parametrize("value", [
    "null",
    "example.com",
    "not a url",
    "javascript:alert(1)",
    "",
    "   ",
    None,
])
def test_parse_as_url_never_raises(value):
    assert parse_as_url(value) is None


@pytest.mark.parametrize("value,expected", [
    ("https://example.com", True),
    ("localhost", True),
    ("localhost:3000", True),
    ("127.0.0.1", False),
    ("::1", False),
    ("null", False),
])
def test_is_url_shaped(value, expected):
    assert is_url_shaped(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("10.0.0.1", "ip"),
    ("::1", "ip"),
    ("localhost:8000", "localhost"),
    ("https://example.com", "url"),
    ("testserver", None),
    ("null", None),
])
def test_candidate_shape(value, expected):
    assert candidate_shape(value) == expected
