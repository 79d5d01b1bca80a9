"""Findings and reports — output of the Response Linter."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from agent_lint.models.principle import Principle


class FieldStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    MALFORMED = "malformed"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class FieldFinding(BaseModel):
    """What the linter found for one expected field."""

    principle: Principle
    field: str
    status: FieldStatus
    severity: Severity
    path: Optional[str] = None      # JSON path of the located value, e.g. "$.meta.confidence"
    message: str = ""


class PrincipleIssue(BaseModel):
    """A cross-field problem, e.g. an out-of-order decision trace."""

    principle: Principle
    severity: Severity
    code: str                       # Machine-readable
    message: str                    # Human-readable
    paths: List[str] = []


class PrincipleResult(BaseModel):
    principle: Principle
    applicable: bool = True
    reason: Optional[str] = None    # Why the principle was skipped
    findings: List[FieldFinding] = []
    issues: List[PrincipleIssue] = []

    @property
    def satisfied(self) -> bool:
        if not self.applicable:
            return True
        return not any(f.severity == Severity.ERROR for f in self.findings) and not any(
            i.severity == Severity.ERROR for i in self.issues
        )


class LintReport(BaseModel):
    """The linter's verdict on one response under one profile."""

    id: str
    profile: str
    results: List[PrincipleResult]
    passed: bool
    score: float = Field(ge=0.0, le=1.0)
    error_count: int = 0
    warning_count: int = 0
    linted_at: datetime

    def result_for(self, principle: Principle) -> Optional[PrincipleResult]:
        for r in self.results:
            if r.principle == principle:
                return r
        return None

    def finding(self, field_name: str) -> Optional[FieldFinding]:
        for r in self.results:
            for f in r.findings:
                if f.field == field_name:
                    return f
        return None
