from pydantic import BaseModel, ConfigDict
from typing import Callable, Literal, Optional

# Entry kinds, in classification priority order
EntryKind = Literal["range", "ip", "domain"]

# What a request-derived candidate looks like
CandidateShape = Literal["ip", "localhost", "url"]

class MatchEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    kind: EntryKind
    compare: Callable[[str], bool]

    def matches(self, candidate: str) -> bool:
        return bool(self.compare(candidate))

class EntryPublic(BaseModel):
    host: str
    kind: EntryKind

class CheckRequest(BaseModel):
    candidate: str

class CheckResult(BaseModel):
    candidate: str
    shape: Optional[CandidateShape] = None
    member: bool
