from typing import Callable, Tuple

from fastapi import Request

from origin_gate.matching.models import MatchEntry

def get_entries(request: Request) -> Tuple[MatchEntry, ...]:
    return request.app.state.origin_entries

def get_matcher(request: Request) -> Callable[[str], bool]:
    """Membership predicate for the configured list, built once in create_app()."""
    return request.app.state.is_member
