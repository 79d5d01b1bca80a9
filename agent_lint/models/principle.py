"""Principles — the controlled vocabulary of agent-friendly response fields."""

from enum import Enum
from typing import List

from pydantic import BaseModel


class Principle(str, Enum):
    """The ten conventions an agent-friendly response can follow."""
    INTENT_SIGNALING = "intent_signaling"
    CONTEXT_CHAIN = "context_chain"
    UNCERTAINTY = "uncertainty"
    REASONING_TRACE = "reasoning_trace"
    TYPED_VALUES = "typed_values"
    ERROR_REMEDIATION = "error_remediation"
    RECOVERY = "recovery"
    RESOURCE_AWARENESS = "resource_awareness"
    TEMPORAL_CONTEXT = "temporal_context"
    ETHICAL_IMPACT = "ethical_impact"


class ValueKind(str, Enum):
    """JSON value kinds a field may hold."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ANY = "any"


class FieldSpec(BaseModel):
    """One expected field of a principle."""

    name: str                                   # JSON key, e.g. "recommendedNextAction"
    kinds: List[ValueKind] = [ValueKind.ANY]
    required: bool = False
    description: str = ""


class PrincipleSpec(BaseModel):
    """
    Vocabulary entry for a principle: the fields it expects.

    Conditional principles only apply to some responses (error descriptors
    are only expected on error responses).
    """

    principle: Principle
    title: str
    summary: str
    fields: List[FieldSpec]
    conditional: bool = False

    def field(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]
