"""
Document Checker — verifies a Markdown guidance document about agent-friendly APIs.

Checks:
- every fenced block tagged json parses as JSON
- every heading that introduces a principle has at least one JSON example
- optionally, every example under a principle heading follows that principle
"""

import json
import logging
import re
from typing import List, Optional, Tuple

from agent_lint.linter.engine import ResponseLinter
from agent_lint.models.document import DocumentReport, Heading, JsonBlock
from agent_lint.models.principle import Principle
from agent_lint.models.profile import LintProfile

logger = logging.getLogger(__name__)

_HEADING = re.compile(r"^ {0,3}(#{1,6})\s+(.*?)\s*#*\s*$")
_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})\s*([^\s`]*)")

# First match wins, so more specific keywords come first.
HEADING_KEYWORDS: List[Tuple[Principle, re.Pattern]] = [
    (Principle.INTENT_SIGNALING, re.compile(r"\bintent|\bnext[- ]action", re.I)),
    (Principle.UNCERTAINTY, re.compile(r"\buncertain|\bconfidence|\bprobabilistic", re.I)),
    (Principle.REASONING_TRACE, re.compile(r"\breasoning|\bexplainab|\bdecision trace", re.I)),
    (Principle.TYPED_VALUES, re.compile(r"\btyped?\b|\benum|\bschema|\bsemantic", re.I)),
    (Principle.ERROR_REMEDIATION, re.compile(r"\berror|\bremediation", re.I)),
    (Principle.RECOVERY, re.compile(r"\brecover|\brollback|\bdry[- ]run|\bdegradation", re.I)),
    (Principle.RESOURCE_AWARENESS, re.compile(r"\bresource|\bcost|\brate[- ]limit|\bquota", re.I)),
    (Principle.TEMPORAL_CONTEXT, re.compile(r"\btemporal|\btime\b|\bfreshness|\bvalidity", re.I)),
    (Principle.CONTEXT_CHAIN, re.compile(r"\bcontext|\bhistory|\bstate chain", re.I)),
    (Principle.ETHICAL_IMPACT, re.compile(r"\bethic|\bbias|\bfairness", re.I)),
]


def principle_for_heading(title: str) -> Optional[Principle]:
    for principle, pattern in HEADING_KEYWORDS:
        if pattern.search(title):
            return principle
    return None


def _scan(text: str) -> Tuple[List[Heading], List[Tuple[int, str, str]]]:
    """Split a document into headings and fenced blocks (line, info, body)."""
    headings: List[Heading] = []
    blocks: List[Tuple[int, str, str]] = []
    fence = None
    fence_line = 0
    info = ""
    body: List[str] = []

    for lineno, line in enumerate(text.splitlines(), start=1):
        if fence is not None:
            stripped = line.strip()
            if stripped and set(stripped) == {fence[0]} and len(stripped) >= len(fence):
                blocks.append((fence_line, info, "\n".join(body)))
                fence = None
            else:
                body.append(line)
            continue

        m = _FENCE.match(line)
        if m:
            fence, info, fence_line, body = m.group(1), m.group(2).lower(), lineno, []
            continue

        m = _HEADING.match(line)
        if m:
            title = m.group(2)
            headings.append(Heading(
                level=len(m.group(1)),
                title=title,
                line=lineno,
                principle=principle_for_heading(title),
            ))

    if fence is not None:
        # An unclosed fence runs to the end of the document.
        blocks.append((fence_line, info, "\n".join(body)))
    return headings, blocks


def _enclosing(headings: List[Heading], line: int) -> Tuple[Optional[Heading], Optional[Principle]]:
    """Nearest heading above `line` and the nearest principle up its ancestry."""
    stack: List[Heading] = []
    for h in headings:
        if h.line > line:
            break
        while stack and stack[-1].level >= h.level:
            stack.pop()
        stack.append(h)
    nearest = stack[-1] if stack else None
    principle = next((h.principle for h in reversed(stack) if h.principle), None)
    return nearest, principle


def _section_end(headings: List[Heading], index: int) -> float:
    level = headings[index].level
    for h in headings[index + 1:]:
        if h.level <= level:
            return h.line
    return float("inf")


def check_document(
    text: str,
    lint_examples: bool = False,
    linter: Optional[ResponseLinter] = None,
) -> DocumentReport:
    """Check a Markdown document. See the module docstring for the rules."""
    headings, raw_blocks = _scan(text)
    linter = linter or ResponseLinter()

    blocks: List[JsonBlock] = []
    for line, info, source in raw_blocks:
        if info != "json":
            continue
        heading, principle = _enclosing(headings, line)
        block = JsonBlock(
            line=line,
            heading=heading.title if heading else None,
            principle=principle,
            source=source,
            valid=True,
        )
        try:
            parsed = json.loads(source)
        except json.JSONDecodeError as e:
            block.valid = False
            block.error = f"line {line + e.lineno}: {e.msg}"
            logger.info("Invalid JSON example at line %d: %s", line, e.msg)
        else:
            if lint_examples and principle is not None:
                profile = LintProfile(
                    name=f"example:{principle.value}",
                    principles=[principle],
                    expect_error=True if principle == Principle.ERROR_REMEDIATION else None,
                )
                block.report = linter.lint(parsed, profile)
        blocks.append(block)

    missing = []
    for index, heading in enumerate(headings):
        if heading.principle is None:
            continue
        end = _section_end(headings, index)
        if not any(heading.line < b.line < end for b in blocks):
            missing.append(heading.title)

    return DocumentReport(
        headings=headings,
        blocks=blocks,
        missing_examples=missing,
        passed=all(b.valid for b in blocks) and not missing,
    )
