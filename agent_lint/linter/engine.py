"""
Response Linter — evaluates a JSON response against an AI-friendliness profile.

Behavioral Contract:
- Accepts a parsed JSON value (or JSON text) and a LintProfile
- For every principle in the profile, reports each expected field as
  present, absent or malformed, with the JSON path where it was found
- Skips conditional principles that do not apply (error descriptors on
  success responses) and says why
- Returns a LintReport; never raises for findings, only for unusable input
- Stateless: one linter may be shared across threads
"""

import json
import logging
from datetime import datetime
from typing import Any, List, Optional, Union
from uuid import uuid4

from agent_lint.config import LinterConfig
from agent_lint.errors import ResponseParseError
from agent_lint.linter.locate import child_path, find_anchor, locate, select_root
from agent_lint.linter.rules import (
    PrincipleContext,
    check_field,
    kind_of,
    matches_kind,
    run_cross_checks,
    utcnow,
)
from agent_lint.models.findings import (
    FieldFinding,
    FieldStatus,
    LintReport,
    PrincipleResult,
    Severity,
)
from agent_lint.models.principle import FieldSpec, Principle, PrincipleSpec
from agent_lint.models.profile import LintProfile
from agent_lint.vocabulary.catalog import all_field_names, get_principle

logger = logging.getLogger(__name__)

ERROR_STATUSES = ("error", "failed", "failure")

# A vocabulary field's value never hosts another principle field:
# $.alternatives[0].confidence is not the primary confidence.
VOCABULARY_KEYS = frozenset(all_field_names())


def parse_response(response: Union[str, bytes, Any]) -> Any:
    """Decode JSON text; already-parsed values pass through untouched."""
    if isinstance(response, (str, bytes, bytearray)):
        try:
            return json.loads(response)
        except UnicodeDecodeError as e:
            raise ResponseParseError(f"Response cannot be decoded as text: {e}") from e
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Response is not valid JSON: {e}") from e
    return response


def looks_like_error(tree: Any) -> bool:
    """Auto-detect an error response from its top-level shape."""
    if not isinstance(tree, dict):
        return False
    if "error" in tree or "errors" in tree:
        return True
    status = tree.get("status")
    return isinstance(status, str) and status.lower() in ERROR_STATUSES


class ResponseLinter:
    """
    Checks responses for the fields an AI agent needs to act on them.
    """

    def __init__(self, config: Optional[LinterConfig] = None):
        self.config = config or LinterConfig()

    def lint(
        self,
        response: Any,
        profile: LintProfile,
        now: Optional[datetime] = None,
    ) -> LintReport:
        """
        Lint a response under a profile.

        Raises ResponseParseError for undecodable JSON text and
        RootNotFoundError when the profile root is missing.
        """
        if now is None:
            now = utcnow()

        tree = parse_response(response)
        root, root_path = select_root(tree, profile.root)
        if self.config.strict and not profile.strict:
            profile = profile.model_copy(update={"strict": True})

        results = [
            self._lint_principle(root, root_path, get_principle(p), profile, now)
            for p in profile.principles
        ]

        findings = [f for r in results for f in r.findings]
        issues = [i for r in results for i in r.issues]
        error_count = sum(1 for f in findings if f.severity == Severity.ERROR) + sum(
            1 for i in issues if i.severity == Severity.ERROR
        )
        warning_count = sum(1 for f in findings if f.severity == Severity.WARNING) + sum(
            1 for i in issues if i.severity == Severity.WARNING
        )
        present = sum(1 for f in findings if f.status == FieldStatus.PRESENT)
        score = present / len(findings) if findings else 1.0

        report = LintReport(
            id=f"lint_{uuid4().hex[:12]}",
            profile=profile.name,
            results=results,
            passed=error_count == 0,
            score=round(score, 4),
            error_count=error_count,
            warning_count=warning_count,
            linted_at=now,
        )
        logger.info(
            "Linted response under profile %s: passed=%s score=%.2f errors=%d warnings=%d",
            profile.name, report.passed, report.score, error_count, warning_count,
        )
        return report

    def _lint_principle(
        self,
        root: Any,
        root_path: str,
        spec: PrincipleSpec,
        profile: LintProfile,
        now: datetime,
    ) -> PrincipleResult:
        reason = self._skip_reason(root, spec, profile)
        if reason:
            logger.debug("Skipping %s: %s", spec.principle.value, reason)
            return PrincipleResult(principle=spec.principle, applicable=False, reason=reason)

        anchored = find_anchor(root, spec.field_names, base=root_path, skip=VOCABULARY_KEYS)
        ctx = PrincipleContext(
            principle=spec.principle,
            config=self.config,
            now=now,
            anchor=anchored[0] if anchored else None,
            anchor_path=anchored[1] if anchored else None,
        )

        findings: List[FieldFinding] = []
        for field_spec in spec.fields:
            if field_spec.name in profile.ignored_fields:
                continue
            finding = self._check(root, root_path, spec.principle, field_spec, profile, ctx)
            findings.append(finding)

        return PrincipleResult(
            principle=spec.principle,
            findings=findings,
            issues=run_cross_checks(ctx),
        )

    def _skip_reason(self, root: Any, spec: PrincipleSpec, profile: LintProfile) -> Optional[str]:
        if not spec.conditional:
            return None
        if spec.principle != Principle.ERROR_REMEDIATION:
            return None
        if profile.expect_error is False:
            return "profile expects a success response"
        if profile.expect_error is None and not looks_like_error(root):
            return "response is not an error response"
        return None

    def _check(
        self,
        root: Any,
        root_path: str,
        principle: Principle,
        field_spec: FieldSpec,
        profile: LintProfile,
        ctx: PrincipleContext,
    ) -> FieldFinding:
        name = field_spec.name
        # Prefer the copy sitting with its sibling fields.
        if ctx.anchor is not None and name in ctx.anchor:
            located = (ctx.anchor[name], child_path(ctx.anchor_path, name))
        else:
            located = locate(root, name, base=root_path, skip=VOCABULARY_KEYS)

        if located is None:
            required = profile.is_required(name, field_spec.required)
            return FieldFinding(
                principle=principle,
                field=name,
                status=FieldStatus.ABSENT,
                severity=Severity.ERROR if required else Severity.WARNING,
                message=f"{'Required' if required else 'Optional'} field '{name}' is missing.",
            )

        value, path = located
        logger.debug("Located %s at %s", name, path)

        if not any(matches_kind(value, k) for k in field_spec.kinds):
            expected = "|".join(k.value for k in field_spec.kinds)
            return FieldFinding(
                principle=principle,
                field=name,
                status=FieldStatus.MALFORMED,
                severity=Severity.ERROR,
                path=path,
                message=f"Expected {expected}, got {kind_of(value)}.",
            )

        problem = check_field(name, value)
        if problem:
            return FieldFinding(
                principle=principle,
                field=name,
                status=FieldStatus.MALFORMED,
                severity=Severity.ERROR,
                path=path,
                message=problem,
            )

        ctx.values[name] = (value, path)
        return FieldFinding(
            principle=principle,
            field=name,
            status=FieldStatus.PRESENT,
            severity=Severity.INFO,
            path=path,
        )
