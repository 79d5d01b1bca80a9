"""
Field Rules — shape checks for each vocabulary field, plus the cross-field
checks that only make sense once a principle's fields are resolved.

A field rule takes the located value and returns None when the value is
well-formed, or a human-readable problem description when it is malformed.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from croniter import croniter
from pydantic import TypeAdapter, ValidationError

from agent_lint.config import LinterConfig
from agent_lint.models.findings import PrincipleIssue, Severity
from agent_lint.models.principle import Principle, ValueKind

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DATETIME = TypeAdapter(datetime)
_DURATION = TypeAdapter(timedelta)


# --- Value helpers ---

def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def matches_kind(value: Any, kind: ValueKind) -> bool:
    """JSON kind test. Booleans are never numbers."""
    if kind == ValueKind.ANY:
        return True
    if kind == ValueKind.STRING:
        return isinstance(value, str)
    if kind == ValueKind.NUMBER:
        return is_number(value)
    if kind == ValueKind.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind == ValueKind.BOOLEAN:
        return isinstance(value, bool)
    if kind == ValueKind.ARRAY:
        return isinstance(value, list)
    if kind == ValueKind.OBJECT:
        return isinstance(value, dict)
    return False


def kind_of(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def json_key(value: Any) -> Tuple[str, Any]:
    """Equality key that keeps JSON types apart (true is not 1)."""
    return kind_of(value), value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string; naive values are taken as UTC."""
    if not isinstance(value, str) or not _ISO_DATE_PREFIX.match(value):
        return None
    try:
        parsed = _DATETIME.validate_python(value)
    except ValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_duration(value: Any) -> Optional[timedelta]:
    """Parse an ISO 8601 duration such as "PT5M" or "P1DT2H"."""
    if not isinstance(value, str) or not value.startswith("P"):
        return None
    try:
        return _DURATION.validate_python(value)
    except ValidationError:
        return None


def action_name(item: Any) -> Optional[str]:
    """Name of an action given as a string or an {"action"|"name": ...} object."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        name = item.get("action", item.get("name"))
        if isinstance(name, str):
            return name
    return None


def _unit_interval(value: Any, label: str) -> Optional[str]:
    if not is_number(value):
        return f"{label} must be a number, got {kind_of(value)}"
    if not 0.0 <= value <= 1.0:
        return f"{label} {value} is outside 0.0-1.0"
    return None


def _non_empty_string(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return "must be a non-empty string"
    return None


# --- Field rules ---

def _check_next_action(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        if not isinstance(value.get("action"), str) or not value["action"].strip():
            return "object form must carry a non-empty 'action' string"
        return None
    return _non_empty_string(value)


def _check_available_actions(value: List[Any]) -> Optional[str]:
    if not value:
        return "must list at least one action"
    for i, item in enumerate(value):
        if action_name(item) is None:
            return f"item {i} must be a string or an object with 'action' or 'name'"
    return None


def _check_previous_states(value: List[Any]) -> Optional[str]:
    for i, item in enumerate(value):
        if not isinstance(item, (str, dict)):
            return f"item {i} must be a string or an object, got {kind_of(item)}"
    return None


def _check_confidence(value: Any) -> Optional[str]:
    return _unit_interval(value, "confidence")


def _check_alternatives(value: List[Any]) -> Optional[str]:
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            return f"item {i} must be an object, got {kind_of(item)}"
        if "confidence" in item:
            problem = _unit_interval(item["confidence"], f"item {i} confidence")
            if problem:
                return problem
    return None


def _check_primary_factors(value: List[Any]) -> Optional[str]:
    if not value:
        return "must list at least one factor"
    for i, item in enumerate(value):
        if isinstance(item, dict):
            if "weight" in item:
                problem = _unit_interval(item["weight"], f"item {i} weight")
                if problem:
                    return problem
        elif not isinstance(item, str):
            return f"item {i} must be a string or an object, got {kind_of(item)}"
    return None


def _check_decision_trace(value: List[Any]) -> Optional[str]:
    if not value:
        return "must contain at least one step"
    return None


def _check_allowed_values(value: List[Any]) -> Optional[str]:
    if not value:
        return "must list at least one value"
    seen = []
    for item in value:
        key = json_key(item)
        if key in seen:
            return f"duplicate value {item!r}"
        seen.append(key)
    return None


def _check_code(value: Any) -> Optional[str]:
    if isinstance(value, str) and not value.strip():
        return "must not be empty"
    return None


def _check_remediation(value: Any) -> Optional[str]:
    if isinstance(value, str) and not value.strip():
        return "must not be empty"
    if isinstance(value, list) and not value:
        return "must list at least one step"
    if isinstance(value, dict) and not value:
        return "must not be an empty object"
    return None


def _check_validation_endpoint(value: str) -> Optional[str]:
    if not value.startswith(("/", "http://", "https://")):
        return "must be an absolute path or an http(s) URL"
    return None


def _check_rollback_strategy(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return _non_empty_string(value)
    if not value:
        return "must not be an empty object"
    return None


def _check_operation_cost(value: Any) -> Optional[str]:
    if is_number(value):
        return None if value >= 0 else "must not be negative"
    for key, item in value.items():
        if is_number(item) and item < 0:
            return f"'{key}' must not be negative"
    return None


def _check_rate_limits(value: Dict[str, Any]) -> Optional[str]:
    for key in ("limit", "remaining"):
        if key in value:
            if not is_number(value[key]):
                return f"'{key}' must be a number, got {kind_of(value[key])}"
            if value[key] < 0:
                return f"'{key}' must not be negative"
    if is_number(value.get("limit")) and is_number(value.get("remaining")):
        if value["remaining"] > value["limit"]:
            return "'remaining' exceeds 'limit'"
    return None


def _check_data_timestamp(value: str) -> Optional[str]:
    if parse_timestamp(value) is None:
        return f"'{value}' is not an ISO 8601 datetime"
    return None


def _check_validity_period(value: Any) -> Optional[str]:
    if isinstance(value, str):
        duration = parse_duration(value)
        if duration is None:
            return f"'{value}' is not an ISO 8601 duration"
        if duration <= timedelta(0):
            return "duration must be positive"
        return None
    if "expiresAt" in value:
        if parse_timestamp(value["expiresAt"]) is None:
            return "'expiresAt' is not an ISO 8601 datetime"
        return None
    if "start" in value or "end" in value:
        start = parse_timestamp(value.get("start"))
        end = parse_timestamp(value.get("end"))
        if start is None or end is None:
            return "'start' and 'end' must both be ISO 8601 datetimes"
        if start > end:
            return "'start' is after 'end'"
        return None
    return "object form needs 'expiresAt' or 'start'/'end'"


def _check_refresh_schedule(value: str) -> Optional[str]:
    if not croniter.is_valid(value):
        return f"'{value}' is not a valid cron expression"
    return None


def _check_bias_score(value: Any) -> Optional[str]:
    return _unit_interval(value, "biasScore")


def _check_fairness_metrics(value: Dict[str, Any]) -> Optional[str]:
    if not value:
        return "must report at least one metric"
    for key, item in value.items():
        if not is_number(item):
            return f"metric '{key}' must be a number, got {kind_of(item)}"
    return None


def _check_impact_assessment(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return _non_empty_string(value)
    if not value:
        return "must not be an empty object"
    return None


FIELD_RULES: Dict[str, Callable[[Any], Optional[str]]] = {
    "status": _non_empty_string,
    "recommendedNextAction": _check_next_action,
    "availableActions": _check_available_actions,
    "previousStates": _check_previous_states,
    "confidence": _check_confidence,
    "alternatives": _check_alternatives,
    "primaryFactors": _check_primary_factors,
    "decisionTrace": _check_decision_trace,
    "type": _non_empty_string,
    "allowedValues": _check_allowed_values,
    "description": _non_empty_string,
    "code": _check_code,
    "message": _non_empty_string,
    "remediation": _check_remediation,
    "validationEndpoint": _check_validation_endpoint,
    "rollbackStrategy": _check_rollback_strategy,
    "operationCost": _check_operation_cost,
    "rateLimits": _check_rate_limits,
    "dataTimestamp": _check_data_timestamp,
    "validityPeriod": _check_validity_period,
    "refreshSchedule": _check_refresh_schedule,
    "biasScore": _check_bias_score,
    "fairnessMetrics": _check_fairness_metrics,
    "impactAssessment": _check_impact_assessment,
}


def check_field(name: str, value: Any) -> Optional[str]:
    """Apply the registered rule for `name`. Unregistered fields always pass."""
    rule = FIELD_RULES.get(name)
    if rule is None:
        return None
    return rule(value)


# --- Cross-field checks ---

@dataclass
class PrincipleContext:
    """Resolved state of one principle, handed to its cross-field check."""

    principle: Principle
    config: LinterConfig
    now: datetime
    anchor: Optional[dict] = None
    anchor_path: Optional[str] = None
    values: Dict[str, Tuple[Any, str]] = field(default_factory=dict)  # well-formed fields only

    def issue(self, severity: Severity, code: str, message: str, *paths: str) -> PrincipleIssue:
        return PrincipleIssue(
            principle=self.principle,
            severity=severity,
            code=code,
            message=message,
            paths=list(paths),
        )


def _cross_intent(ctx: PrincipleContext) -> List[PrincipleIssue]:
    if "recommendedNextAction" not in ctx.values or "availableActions" not in ctx.values:
        return []
    next_action, next_path = ctx.values["recommendedNextAction"]
    actions, actions_path = ctx.values["availableActions"]
    wanted = action_name(next_action)
    names = [action_name(a) for a in actions]
    if wanted not in names:
        return [ctx.issue(
            Severity.WARNING,
            "next_action_unavailable",
            f"Recommended action '{wanted}' is not listed in availableActions.",
            next_path, actions_path,
        )]
    return []


def _cross_context(ctx: PrincipleContext) -> List[PrincipleIssue]:
    if "previousStates" not in ctx.values:
        return []
    states, path = ctx.values["previousStates"]
    stamps = []
    for item in states:
        if isinstance(item, dict) and "timestamp" in item:
            parsed = parse_timestamp(item["timestamp"])
            if parsed is not None:
                stamps.append(parsed)
    if any(later < earlier for earlier, later in zip(stamps, stamps[1:])):
        return [ctx.issue(
            Severity.WARNING,
            "history_not_chronological",
            "previousStates should be ordered oldest first.",
            path,
        )]
    return []


def _cross_uncertainty(ctx: PrincipleContext) -> List[PrincipleIssue]:
    issues = []
    if "confidence" not in ctx.values:
        return issues
    confidence, conf_path = ctx.values["confidence"]

    if "alternatives" in ctx.values:
        alternatives, alt_path = ctx.values["alternatives"]
        for i, alt in enumerate(alternatives):
            alt_conf = alt.get("confidence")
            if is_number(alt_conf) and alt_conf > confidence:
                issues.append(ctx.issue(
                    Severity.WARNING,
                    "alternative_exceeds_primary",
                    f"Alternative {i} has confidence {alt_conf} above the primary {confidence}.",
                    f"{alt_path}[{i}]", conf_path,
                ))

    if "requiresHumanReview" in ctx.values:
        review, review_path = ctx.values["requiresHumanReview"]
        if review is False and confidence < ctx.config.review_threshold:
            issues.append(ctx.issue(
                Severity.WARNING,
                "low_confidence_without_review",
                f"Confidence {confidence} is below {ctx.config.review_threshold} "
                f"but requiresHumanReview is false.",
                conf_path, review_path,
            ))
    return issues


def _cross_reasoning(ctx: PrincipleContext) -> List[PrincipleIssue]:
    issues = []
    if "decisionTrace" in ctx.values:
        trace, trace_path = ctx.values["decisionTrace"]
        steps = [
            item["step"] for item in trace
            if isinstance(item, dict) and is_number(item.get("step"))
        ]
        if any(later <= earlier for earlier, later in zip(steps, steps[1:])):
            issues.append(ctx.issue(
                Severity.ERROR,
                "trace_out_of_order",
                "decisionTrace step numbers must be strictly increasing.",
                trace_path,
            ))

    if "primaryFactors" in ctx.values:
        factors, factors_path = ctx.values["primaryFactors"]
        weights = [
            item["weight"] for item in factors
            if isinstance(item, dict) and is_number(item.get("weight"))
        ]
        total = sum(weights)
        if weights and total > 1.0 + ctx.config.weight_tolerance:
            issues.append(ctx.issue(
                Severity.WARNING,
                "factor_weights_exceed_one",
                f"primaryFactors weights sum to {round(total, 4)}.",
                factors_path,
            ))
    return issues


def _cross_typed_values(ctx: PrincipleContext) -> List[PrincipleIssue]:
    anchor = ctx.anchor
    if anchor is None or "value" not in anchor or "allowedValues" not in ctx.values:
        return []
    allowed, allowed_path = ctx.values["allowedValues"]
    # Only a value sitting next to its own enumeration is checked.
    if anchor.get("allowedValues") is not allowed:
        return []
    if json_key(anchor["value"]) not in [json_key(v) for v in allowed]:
        return [ctx.issue(
            Severity.ERROR,
            "value_not_allowed",
            f"Value {anchor['value']!r} is not one of allowedValues.",
            f"{ctx.anchor_path}.value", allowed_path,
        )]
    return []


def _cross_temporal(ctx: PrincipleContext) -> List[PrincipleIssue]:
    if "dataTimestamp" not in ctx.values:
        return []
    raw, path = ctx.values["dataTimestamp"]
    stamp = parse_timestamp(raw)
    if stamp and stamp > ctx.now + timedelta(seconds=ctx.config.clock_skew_seconds):
        return [ctx.issue(
            Severity.WARNING,
            "timestamp_in_future",
            f"dataTimestamp {raw} is in the future.",
            path,
        )]
    return []


CROSS_CHECKS: Dict[Principle, Callable[[PrincipleContext], List[PrincipleIssue]]] = {
    Principle.INTENT_SIGNALING: _cross_intent,
    Principle.CONTEXT_CHAIN: _cross_context,
    Principle.UNCERTAINTY: _cross_uncertainty,
    Principle.REASONING_TRACE: _cross_reasoning,
    Principle.TYPED_VALUES: _cross_typed_values,
    Principle.TEMPORAL_CONTEXT: _cross_temporal,
}


def run_cross_checks(ctx: PrincipleContext) -> List[PrincipleIssue]:
    check_fn = CROSS_CHECKS.get(ctx.principle)
    if check_fn is None:
        return []
    return check_fn(ctx)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
