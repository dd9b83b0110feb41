from fastapi import APIRouter, Depends, Request

from origin_gate.config import settings
from origin_gate.deps import get_entries, get_matcher
from origin_gate.matching.classifier import candidate_shape
from origin_gate.matching.models import CheckRequest, CheckResult, EntryPublic
from origin_gate.utils.rate_limit import limiter
from origin_gate.utils.response import success

router = APIRouter(prefix="/origins", tags=["origins"])

@router.get("/entries", summary="List the configured entries as parsed")
async def list_entries(entries = Depends(get_entries)):
    return success([EntryPublic(host=e.host, kind=e.kind).model_dump() for e in entries])

@router.post("/check", summary="Test one candidate against the configured list")
@limiter.limit(f"{settings.RATE_CHECK_PER_MIN}/minute")
async def check_candidate(
    request: Request,
    payload: CheckRequest,
    is_member = Depends(get_matcher),
):
    candidate = payload.candidate.strip()
    result = CheckResult(
        candidate=candidate,
        shape=candidate_shape(candidate),
        member=is_member(candidate),
    )
    return success(result.model_dump())
