"""Document check models — results of checking a Markdown guidance document."""

from typing import List, Optional

from pydantic import BaseModel

from agent_lint.models.findings import LintReport
from agent_lint.models.principle import Principle


class Heading(BaseModel):
    level: int
    title: str
    line: int
    principle: Optional[Principle] = None


class JsonBlock(BaseModel):
    """A fenced code block tagged json."""

    line: int                       # 1-based line of the opening fence
    heading: Optional[str] = None   # Nearest enclosing heading title
    principle: Optional[Principle] = None
    source: str
    valid: bool
    error: Optional[str] = None
    report: Optional[LintReport] = None


class DocumentReport(BaseModel):
    headings: List[Heading] = []
    blocks: List[JsonBlock] = []
    missing_examples: List[str] = []    # Principle headings without a JSON example
    passed: bool

    @property
    def invalid_blocks(self) -> List[JsonBlock]:
        return [b for b in self.blocks if not b.valid]
