"""
Shape checks for list entries and request-derived candidates.

Everything here runs on attacker-controlled header values, so every function
returns False/None on bad input instead of raising.
"""
import re
from ipaddress import (
    IPv4Address,
    IPv6Address,
    IPv4Network,
    IPv6Network,
    ip_address,
    ip_network,
)
from typing import Optional, Union

from pydantic import AnyUrl, TypeAdapter, ValidationError

from origin_gate.matching.models import CandidateShape

IPAddress = Union[IPv4Address, IPv6Address]
IPNetwork = Union[IPv4Network, IPv6Network]

_LOCALHOST_RE = re.compile(
    r"^(?:http://)?(?:127\.0\.0\.1|localhost(?::\d{1,5})?(?:/\S*)?)$",
    re.IGNORECASE,
)
_BARE_LOCALHOST_RE = re.compile(r"^localhost", re.IGNORECASE)
_PREFIX_RE = re.compile(r"^\d{1,3}$")

_url_adapter = TypeAdapter(AnyUrl)

LOOPBACK_V4 = "127.0.0.1"
LOOPBACK_V6 = "::1"


def is_localhost_alias(value) -> bool:
    """`::1`, `127.0.0.1` or `localhost[:port][/path]`, optionally with `http://`."""
    if not isinstance(value, str) or not value:
        return False
    return value == LOOPBACK_V6 or bool(_LOCALHOST_RE.match(value))


def to_address(value) -> Optional[IPAddress]:
    """Parse an IP literal, unwrapping IPv4-mapped IPv6 (`::ffff:a.b.c.d`)."""
    if not isinstance(value, str) or not value:
        return None
    try:
        addr = ip_address(value)
    except ValueError:
        return None
    if isinstance(addr, IPv6Address) and addr.ipv4_mapped is not None:
        return addr.ipv4_mapped
    return addr


def to_network(value) -> Optional[IPNetwork]:
    if not isinstance(value, str) or "/" not in value:
        return None
    _, _, prefix = value.partition("/")
    # ip_network also takes netmasks ("/255.0.0.0"); ranges here are prefix lengths only
    if not _PREFIX_RE.match(prefix):
        return None
    try:
        return ip_network(value, strict=False)
    except ValueError:
        return None


def is_valid_ip(value) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        ip_address(value)
    except ValueError:
        return False
    return True


def is_cidr(value) -> bool:
    return to_network(value) is not None


def ip_equals(a, b) -> bool:
    left, right = to_address(a), to_address(b)
    if left is None or right is None:
        return False
    return left == right


def is_loopback_ip(value) -> bool:
    # exact addresses only, not ipaddress.is_loopback (127.0.0.2 is not a match)
    return ip_equals(LOOPBACK_V4, value) or ip_equals(LOOPBACK_V6, value)


def in_range(candidate, network: Union[str, IPNetwork]) -> bool:
    """
    True when `candidate` sits inside `network`; families never cross.
    `::ffff:10.1.2.3` stays IPv6 here: it is in `::ffff:0:0/96`, not `10.0.0.0/8`.
    """
    if isinstance(network, str):
        network = to_network(network)
    if network is None or not is_valid_ip(candidate):
        return False
    addr = ip_address(candidate)
    if addr.version != network.version:
        return False
    return addr in network


def parse_as_url(value) -> Optional[AnyUrl]:
    """
    Parse `value` as an absolute URL with a host.
    - `localhost...` without a scheme gets `http://` prepended, so
      `localhost:3000` parses.
    - Hostless URLs (`null`, `javascript:...`, `file:///...`) are rejected.
    Returns None instead of raising.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if _BARE_LOCALHOST_RE.match(value) and "://" not in value:
        value = f"http://{value}"
    try:
        url = _url_adapter.validate_python(value)
    except ValidationError:
        return None
    if not url.host:
        return None
    return url


def is_url_shaped(value) -> bool:
    # Pure IPs go through the IP path only
    return parse_as_url(value) is not None and not is_valid_ip(value)


def candidate_shape(value) -> Optional[CandidateShape]:
    if is_valid_ip(value):
        return "ip"
    if is_localhost_alias(value):
        return "localhost"
    if is_url_shaped(value):
        return "url"
    return None
