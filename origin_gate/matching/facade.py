"""
Decision facade: list spec in, membership predicates and CORS delegates out.

A delegate has the signature `delegate(request, callback)` and answers through
`callback(error, result)`:
- rejected: `callback(OriginNotAllowedError(<first candidate>), None)`
- accepted: `callback(None, {"origin": True})`, i.e. reflect the request origin
"""
from typing import Any, Callable, Dict, Optional

from starlette.requests import HTTPConnection

from origin_gate.matching.candidates import extract_candidates, first_candidate
from origin_gate.matching.classifier import (
    is_localhost_alias,
    is_loopback_ip,
    is_url_shaped,
    is_valid_ip,
)
from origin_gate.matching.entries import ListSpec, parse_list
from origin_gate.utils.errors import OriginNotAllowedError

Verdict = Callable[[Optional[OriginNotAllowedError], Optional[Dict[str, Any]]], Any]
Delegate = Callable[[HTTPConnection, Verdict], Any]


def build_matcher(list_spec: ListSpec) -> Callable[[str], bool]:
    entries = parse_list(list_spec)
    address_entries = tuple(e for e in entries if e.kind in ("range", "ip"))
    domain_entries = tuple(e for e in entries if e.kind == "domain")

    def is_member(candidate: str) -> bool:
        if is_valid_ip(candidate):
            if is_loopback_ip(candidate) or any(e.matches(candidate) for e in address_entries):
                return True
        if is_localhost_alias(candidate) or is_url_shaped(candidate):
            return any(e.matches(candidate) for e in domain_entries)
        return False

    return is_member


def build_request_predicate(
    list_spec: ListSpec,
    include_remote_addr: bool = True,
) -> Callable[[HTTPConnection], bool]:
    is_member = build_matcher(list_spec)

    def matches_request(request: HTTPConnection) -> bool:
        return any(is_member(c) for c in extract_candidates(request, include_remote_addr))

    return matches_request


def _delegate(reject_when: bool, list_spec: ListSpec, include_remote_addr: bool) -> Delegate:
    matches_request = build_request_predicate(list_spec, include_remote_addr)

    def origin_delegate(request: HTTPConnection, callback: Verdict):
        if matches_request(request) is reject_when:
            candidate = first_candidate(request, include_remote_addr)
            return callback(OriginNotAllowedError(candidate), None)
        return callback(None, {"origin": True})

    return origin_delegate


def create_blocked_list_middleware(block_list: ListSpec, include_remote_addr: bool = True) -> Delegate:
    """Reject requests whose origin is on `block_list`."""
    return _delegate(True, block_list, include_remote_addr)


def create_allowed_list_middleware(allow_list: ListSpec, include_remote_addr: bool = True) -> Delegate:
    """Reject requests whose origin is not on `allow_list`."""
    return _delegate(False, allow_list, include_remote_addr)
