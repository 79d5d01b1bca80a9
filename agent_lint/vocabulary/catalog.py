"""
Vocabulary Catalog — the ten principles and the fields each one expects.

Also registers the built-in lint profiles.
"""

from typing import Dict, List, Union

from agent_lint.errors import UnknownProfileError
from agent_lint.models.principle import FieldSpec, Principle, PrincipleSpec
from agent_lint.models.principle import ValueKind as K
from agent_lint.models.profile import LintProfile


PRINCIPLES: Dict[Principle, PrincipleSpec] = {
    Principle.INTENT_SIGNALING: PrincipleSpec(
        principle=Principle.INTENT_SIGNALING,
        title="Intent signaling",
        summary="State the current status and the suggested next step.",
        fields=[
            FieldSpec(name="status", kinds=[K.STRING], required=True,
                      description="Current state of the resource or operation"),
            FieldSpec(name="recommendedNextAction", kinds=[K.STRING, K.OBJECT], required=True,
                      description="The action the caller should take next"),
            FieldSpec(name="availableActions", kinds=[K.ARRAY],
                      description="Every action valid from the current state"),
        ],
    ),
    Principle.CONTEXT_CHAIN: PrincipleSpec(
        principle=Principle.CONTEXT_CHAIN,
        title="Context chain",
        summary="Carry the history of prior states and operations.",
        fields=[
            FieldSpec(name="previousStates", kinds=[K.ARRAY], required=True,
                      description="Prior states, oldest first"),
            FieldSpec(name="dependentOperations", kinds=[K.ARRAY],
                      description="Operations this result depends on"),
        ],
    ),
    Principle.UNCERTAINTY: PrincipleSpec(
        principle=Principle.UNCERTAINTY,
        title="Uncertainty",
        summary="Score predictions and offer alternatives.",
        fields=[
            FieldSpec(name="confidence", kinds=[K.NUMBER], required=True,
                      description="Confidence in the primary result, 0.0-1.0"),
            FieldSpec(name="alternatives", kinds=[K.ARRAY],
                      description="Other candidate results with their own confidence"),
            FieldSpec(name="requiresHumanReview", kinds=[K.BOOLEAN],
                      description="Whether a human should confirm before acting"),
        ],
    ),
    Principle.REASONING_TRACE: PrincipleSpec(
        principle=Principle.REASONING_TRACE,
        title="Reasoning trace",
        summary="Expose the factors and order of evaluation behind a decision.",
        fields=[
            FieldSpec(name="primaryFactors", kinds=[K.ARRAY], required=True,
                      description="Factors that drove the decision"),
            FieldSpec(name="decisionTrace", kinds=[K.ARRAY],
                      description="Ordered evaluation steps"),
        ],
    ),
    Principle.TYPED_VALUES: PrincipleSpec(
        principle=Principle.TYPED_VALUES,
        title="Typed values",
        summary="Describe fields with strict types and enumerations.",
        fields=[
            FieldSpec(name="type", kinds=[K.STRING], required=True,
                      description="Declared type of the value"),
            FieldSpec(name="allowedValues", kinds=[K.ARRAY],
                      description="Closed set of permitted values"),
            FieldSpec(name="description", kinds=[K.STRING], required=True,
                      description="What the value means"),
        ],
    ),
    Principle.ERROR_REMEDIATION: PrincipleSpec(
        principle=Principle.ERROR_REMEDIATION,
        title="Error remediation",
        summary="Explain failures and how to recover from them.",
        conditional=True,
        fields=[
            FieldSpec(name="code", kinds=[K.STRING, K.INTEGER], required=True,
                      description="Machine-readable error code"),
            FieldSpec(name="message", kinds=[K.STRING], required=True,
                      description="Human-readable explanation"),
            FieldSpec(name="remediation", kinds=[K.STRING, K.ARRAY, K.OBJECT], required=True,
                      description="Steps that resolve the error"),
        ],
    ),
    Principle.RECOVERY: PrincipleSpec(
        principle=Principle.RECOVERY,
        title="Recovery",
        summary="Offer validation, dry runs and rollback.",
        fields=[
            FieldSpec(name="validationEndpoint", kinds=[K.STRING],
                      description="Where to validate a request before sending it"),
            FieldSpec(name="dryRunOption", kinds=[K.BOOLEAN, K.OBJECT],
                      description="Whether the operation can be simulated"),
            FieldSpec(name="rollbackStrategy", kinds=[K.STRING, K.OBJECT],
                      description="How to undo the operation"),
        ],
    ),
    Principle.RESOURCE_AWARENESS: PrincipleSpec(
        principle=Principle.RESOURCE_AWARENESS,
        title="Resource awareness",
        summary="Expose cost and quota implications.",
        fields=[
            FieldSpec(name="operationCost", kinds=[K.NUMBER, K.OBJECT], required=True,
                      description="What the operation consumed"),
            FieldSpec(name="rateLimits", kinds=[K.OBJECT],
                      description="Quota limit, remaining calls and reset time"),
        ],
    ),
    Principle.TEMPORAL_CONTEXT: PrincipleSpec(
        principle=Principle.TEMPORAL_CONTEXT,
        title="Temporal context",
        summary="State when the data was produced and how long it stays valid.",
        fields=[
            FieldSpec(name="dataTimestamp", kinds=[K.STRING], required=True,
                      description="ISO 8601 time the data was produced"),
            FieldSpec(name="validityPeriod", kinds=[K.STRING, K.OBJECT],
                      description="ISO 8601 duration or explicit window"),
            FieldSpec(name="refreshSchedule", kinds=[K.STRING],
                      description="Cron expression of the refresh cadence"),
        ],
    ),
    Principle.ETHICAL_IMPACT: PrincipleSpec(
        principle=Principle.ETHICAL_IMPACT,
        title="Ethical impact",
        summary="Report bias, fairness and impact metrics.",
        fields=[
            FieldSpec(name="biasScore", kinds=[K.NUMBER],
                      description="Measured bias, 0.0-1.0"),
            FieldSpec(name="fairnessMetrics", kinds=[K.OBJECT],
                      description="Named numeric fairness metrics"),
            FieldSpec(name="impactAssessment", kinds=[K.STRING, K.OBJECT],
                      description="Who is affected and how"),
        ],
    ),
}


def get_principle(principle: Union[Principle, str]) -> PrincipleSpec:
    """Look up a principle by enum or id. Raises ValueError on unknown ids."""
    return PRINCIPLES[Principle(principle)]


def all_field_names() -> List[str]:
    names = []
    for spec in PRINCIPLES.values():
        names.extend(spec.field_names)
    return names


_PROFILES: Dict[str, LintProfile] = {
    "minimal": LintProfile(
        name="minimal",
        description="Status, next action and error remediation",
        principles=[Principle.INTENT_SIGNALING, Principle.ERROR_REMEDIATION],
    ),
    "decision": LintProfile(
        name="decision",
        description="Responses that carry a model decision",
        principles=[
            Principle.INTENT_SIGNALING,
            Principle.UNCERTAINTY,
            Principle.REASONING_TRACE,
            Principle.ERROR_REMEDIATION,
        ],
    ),
    "full": LintProfile(
        name="full",
        description="All ten principles",
        principles=list(Principle),
    ),
}


def get_profile(name: str) -> LintProfile:
    """Return a copy of a built-in profile."""
    profile = _PROFILES.get(name)
    if profile is None:
        raise UnknownProfileError(name)
    return profile.model_copy(deep=True)


def list_profiles() -> List[LintProfile]:
    return [p.model_copy(deep=True) for p in _PROFILES.values()]
