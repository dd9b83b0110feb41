# origin_gate/matching/entries.py
import re
from ipaddress import ip_address
from collections.abc import Iterable
from typing import Optional, Tuple, Union

from pydantic import AnyUrl

from origin_gate.matching.classifier import (
    in_range,
    ip_equals,
    is_valid_ip,
    parse_as_url,
    to_network,
)
from origin_gate.matching.models import MatchEntry
from origin_gate.utils.logging import logger

ListSpec = Union[str, Iterable[str], None]

LIST_DELIMITER = "|"

# hostname[:port] with no scheme, e.g. "localhost:3000", "example.com", "[::1]:8080"
_SHORTHAND_RE = re.compile(
    r"^(?P<hostname>\[[0-9a-f:.]+\]|[^\s:/\[\]@?#]+)(?::(?P<port>\d{1,5}))?/?$",
    re.IGNORECASE,
)


# ==== URL/domain comparison ====

def _has_scheme(value: str) -> bool:
    return "://" in value

def _shorthand(value: str) -> Optional[Tuple[str, Optional[int]]]:
    """Split a scheme-less entry into (hostname, port); None when it isn't one."""
    m = _SHORTHAND_RE.match(value.strip())
    if not m:
        return None
    hostname = m.group("hostname").lower()
    if hostname.startswith("["):
        try:
            hostname = f"[{ip_address(hostname[1:-1]).compressed}]"
        except ValueError:
            return None
    else:
        # Same parser as candidates, so "évil.com" becomes "xn--vil-bma.com"
        url = parse_as_url(f"http://{hostname}")
        if url is None:
            return None
        hostname = url.host
    port = m.group("port")
    return hostname, (int(port) if port is not None else None)

def _structurally_equal(a: AnyUrl, b: AnyUrl) -> bool:
    return a.scheme == b.scheme and a.port == b.port and a.host == b.host

def _matches_host(shorthand: Tuple[str, Optional[int]], b: AnyUrl) -> bool:
    hostname, port = shorthand
    if hostname != (b.host or "").lower():
        return False
    # "localhost" matches localhost on any port, "localhost:3000" only on 3000
    return port is None or port == b.port

def compare_uris(entry: str, candidate: str) -> bool:
    """
    Is `candidate` the same origin as the configured `entry`?

    Not symmetric: only the entry may leave out its scheme. A scheme-less entry
    (`localhost`, `example.com:8080`) is compared against the candidate's
    host[:port]; anything else must agree on scheme, port and hostname.
    """
    b = parse_as_url(candidate)
    if b is None:
        return False

    a = parse_as_url(entry)
    if a is not None and _structurally_equal(a, b):
        return True

    if _has_scheme(entry):
        return False
    shorthand = _shorthand(entry)
    return shorthand is not None and _matches_host(shorthand, b)


# ==== List parsing ====

def normalize_list(spec: ListSpec) -> list[str]:
    """Raw entries from any iterable of strings, or from a `|`-delimited string with `"` removed."""
    if isinstance(spec, Iterable) and not isinstance(spec, (str, bytes)):
        raw = [str(item) for item in spec if item]
    else:
        raw = str(spec or "").strip().replace('"', "").split(LIST_DELIMITER)
    return [item.strip() for item in raw if item and item.strip()]

def _range_entry(host: str) -> MatchEntry:
    network = to_network(host)
    return MatchEntry(host=host, kind="range", compare=lambda candidate: in_range(candidate, network))

def _ip_entry(host: str) -> MatchEntry:
    return MatchEntry(host=host, kind="ip", compare=lambda candidate: ip_equals(host, candidate))

def _domain_entry(host: str) -> MatchEntry:
    if parse_as_url(host) is None and (_has_scheme(host) or _shorthand(host) is None):
        logger.warning(f"List entry '{host}' is not a usable URL or host; it will never match")
    return MatchEntry(host=host, kind="domain", compare=lambda candidate: compare_uris(host, candidate))

def build_entry(host: str) -> Optional[MatchEntry]:
    # Priority matters: "10.0.0.0/8" must become a range, not fall through to a domain
    if not host:
        return None
    if to_network(host) is not None:
        return _range_entry(host)
    if is_valid_ip(host):
        return _ip_entry(host)
    return _domain_entry(host)

def parse_list(spec: ListSpec) -> Tuple[MatchEntry, ...]:
    entries = (build_entry(host) for host in normalize_list(spec))
    return tuple(entry for entry in entries if entry is not None)
