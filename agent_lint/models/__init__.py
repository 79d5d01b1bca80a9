"""Agent Lint data models."""

from agent_lint.models.document import DocumentReport, Heading, JsonBlock
from agent_lint.models.findings import (
    FieldFinding,
    FieldStatus,
    LintReport,
    PrincipleIssue,
    PrincipleResult,
    Severity,
)
from agent_lint.models.principle import FieldSpec, Principle, PrincipleSpec, ValueKind
from agent_lint.models.profile import LintProfile

__all__ = [
    "DocumentReport",
    "FieldFinding",
    "FieldSpec",
    "FieldStatus",
    "Heading",
    "JsonBlock",
    "LintProfile",
    "LintReport",
    "Principle",
    "PrincipleIssue",
    "PrincipleResult",
    "PrincipleSpec",
    "Severity",
    "ValueKind",
]
