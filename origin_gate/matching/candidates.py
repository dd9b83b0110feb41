from typing import List

from starlette.requests import HTTPConnection

from origin_gate.matching.classifier import candidate_shape


def raw_candidates(request: HTTPConnection, include_remote_addr: bool = True) -> List[str]:
    """
    Origin identifiers in fixed order:
    Host, Origin, each X-Forwarded-For hop (left to right), then the client address.
    """
    headers = request.headers
    values = [headers.get("host"), headers.get("origin")]

    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        values.extend(hop.strip() for hop in forwarded.split(","))

    if include_remote_addr and request.client is not None:
        values.append(request.client.host)

    return [v for v in values if v]


def extract_candidates(request: HTTPConnection, include_remote_addr: bool = True) -> List[str]:
    # Values like "null" or "testserver" can't match any entry; drop them before matching
    return [v for v in raw_candidates(request, include_remote_addr) if candidate_shape(v) is not None]


def first_candidate(request: HTTPConnection, include_remote_addr: bool = True) -> str:
    candidates = extract_candidates(request, include_remote_addr)
    return candidates[0] if candidates else ""
