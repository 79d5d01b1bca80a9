"""Lint Profile — which principles a response is expected to follow."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from agent_lint.models.principle import Principle


class LintProfile(BaseModel):
    """
    An AI-friendliness profile.

    strict promotes every absent optional field to an error. required_fields
    promotes individual fields. root is a dotted path (e.g. "data.result")
    selecting the subtree to lint; empty means the whole document.
    expect_error forces the error descriptor on (True) or off (False);
    None auto-detects from the response.
    """

    name: str = "custom"
    description: str = ""
    principles: List[Principle] = Field(min_length=1)
    strict: bool = False
    required_fields: List[str] = []
    ignored_fields: List[str] = []
    root: str = ""
    expect_error: Optional[bool] = None

    @field_validator("principles")
    @classmethod
    def _dedupe_principles(cls, value: List[Principle]) -> List[Principle]:
        seen = []
        for p in value:
            if p not in seen:
                seen.append(p)
        return seen

    def is_required(self, field_name: str, spec_required: bool) -> bool:
        return self.strict or spec_required or field_name in self.required_fields
