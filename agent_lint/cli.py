"""
Agent Lint CLI — lint responses and guidance documents.

Usage:
    agent-lint response FILE [--profile NAME|PATH] [--principle P ...] [--strict]
    agent-lint response -                 # read the response from stdin
    agent-lint docs GUIDE.md [--lint-examples]
    agent-lint principles                 # print the vocabulary

Exit codes: 0 pass, 1 lint failure, 2 unusable input.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from agent_lint.config import LinterConfig, configure_logging, load_config
from agent_lint.docs.markdown import check_document
from agent_lint.errors import (
    AgentLintError,
    ProfileLoadError,
    ResponseParseError,
    UnknownProfileError,
)
from agent_lint.linter.engine import ResponseLinter
from agent_lint.models.document import DocumentReport
from agent_lint.models.findings import FieldStatus, LintReport, Severity
from agent_lint.models.principle import Principle
from agent_lint.models.profile import LintProfile
from agent_lint.vocabulary.catalog import PRINCIPLES, get_profile


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_MARKS = {
    FieldStatus.PRESENT: "ok",
    FieldStatus.ABSENT: "--",
    FieldStatus.MALFORMED: "!!",
}


def load_profile(ref: str) -> LintProfile:
    """Resolve a built-in profile name, or else a path to a profile JSON file."""
    try:
        return get_profile(ref)
    except UnknownProfileError:
        path = Path(ref)
        if path.suffix != ".json" and not path.exists():
            raise
    try:
        return LintProfile.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileLoadError(f"Cannot read profile {ref}: {e}") from e
    except ValidationError as e:
        raise ProfileLoadError(f"Invalid profile {ref}: {e}") from e


def read_source(ref: str) -> str:
    """Read a FILE argument; "-" means stdin."""
    try:
        if ref == "-":
            return sys.stdin.read()
        return Path(ref).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ResponseParseError(f"{ref} is not valid UTF-8 text: {e}") from e


def build_profile(args: argparse.Namespace, config: LinterConfig) -> LintProfile:
    if args.principle and not args.profile:
        profile = LintProfile(name="custom", principles=args.principle)
    else:
        profile = load_profile(args.profile or config.profile)
        if args.principle:
            profile = profile.model_copy(update={"principles": args.principle})

    updates = {}
    if args.strict:
        updates["strict"] = True
    if args.root is not None:
        updates["root"] = args.root
    if args.expect_error is not None:
        updates["expect_error"] = args.expect_error
    return profile.model_copy(update=updates) if updates else profile


def format_report(report: LintReport) -> str:
    lines = [f"Profile: {report.profile}"]
    for result in report.results:
        if not result.applicable:
            lines.append(f"\n[{result.principle.value}] skipped ({result.reason})")
            continue
        state = "ok" if result.satisfied else "FAIL"
        lines.append(f"\n[{result.principle.value}] {state}")
        for f in result.findings:
            where = f" at {f.path}" if f.path else ""
            detail = f": {f.message}" if f.message and f.status != FieldStatus.PRESENT else ""
            lines.append(f"  {_MARKS[f.status]} {f.field}{where}{detail}")
        for issue in result.issues:
            lines.append(f"  {issue.severity.value}: {issue.code}: {issue.message}")
    verdict = "PASSED" if report.passed else "FAILED"
    lines.append(
        f"\n{verdict}  score={report.score:.2f}  "
        f"errors={report.error_count}  warnings={report.warning_count}"
    )
    return "\n".join(lines)


def format_document(report: DocumentReport) -> str:
    lines = [f"JSON examples: {len(report.blocks)}"]
    for block in report.invalid_blocks:
        lines.append(f"  invalid JSON at line {block.line}: {block.error}")
    for title in report.missing_examples:
        lines.append(f"  no JSON example under '{title}'")
    for block in report.blocks:
        if block.report is not None and not block.report.passed:
            problems = [
                f.field for r in block.report.results for f in r.findings
                if f.severity == Severity.ERROR
            ]
            lines.append(
                f"  example at line {block.line} does not follow "
                f"{block.principle.value}: {', '.join(problems) or 'see issues'}"
            )
    lines.append("\nPASSED" if report.passed else "\nFAILED")
    return "\n".join(lines)


def cmd_response(args: argparse.Namespace, config: LinterConfig) -> int:
    source = read_source(args.file)
    profile = build_profile(args, config)
    report = ResponseLinter(config).lint(source, profile)
    if args.format == "json":
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))
    return EXIT_OK if report.passed else EXIT_FAILED


def cmd_docs(args: argparse.Namespace, config: LinterConfig) -> int:
    text = read_source(args.file)
    report = check_document(text, lint_examples=args.lint_examples, linter=ResponseLinter(config))
    if args.format == "json":
        print(report.model_dump_json(indent=2))
    else:
        print(format_document(report))
    return EXIT_OK if report.passed else EXIT_FAILED


def cmd_principles(args: argparse.Namespace, config: LinterConfig) -> int:
    if args.format == "json":
        print(json.dumps([s.model_dump(mode="json") for s in PRINCIPLES.values()], indent=2))
        return EXIT_OK
    for spec in PRINCIPLES.values():
        print(f"{spec.principle.value}: {spec.summary}")
        for f in spec.fields:
            marker = "*" if f.required else " "
            kinds = "|".join(k.value for k in f.kinds)
            print(f"  {marker} {f.name} ({kinds})")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-lint",
        description="Check JSON API responses for AI-agent friendly conventions",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    resp = sub.add_parser("response", help="Lint a JSON response")
    resp.add_argument("file", help="Response JSON file, or - for stdin")
    resp.add_argument("--profile", help="Built-in profile name or profile JSON file")
    resp.add_argument(
        "--principle",
        action="append",
        type=Principle,
        choices=list(Principle),
        metavar="PRINCIPLE",
        help="Principle to check (repeatable); overrides the profile's list",
    )
    resp.add_argument("--strict", action="store_true", help="Treat missing optional fields as errors")
    resp.add_argument("--root", help="Dotted path of the subtree to lint")
    expect = resp.add_mutually_exclusive_group()
    expect.add_argument("--expect-error", dest="expect_error", action="store_const", const=True)
    expect.add_argument("--expect-success", dest="expect_error", action="store_const", const=False)
    resp.add_argument("--format", choices=["text", "json"], default="text")
    resp.set_defaults(func=cmd_response)

    docs = sub.add_parser("docs", help="Check a Markdown guidance document")
    docs.add_argument("file", help="Markdown file")
    docs.add_argument("--lint-examples", action="store_true",
                      help="Lint each example against its section's principle")
    docs.add_argument("--format", choices=["text", "json"], default="text")
    docs.set_defaults(func=cmd_docs)

    princ = sub.add_parser("principles", help="Print the field vocabulary")
    princ.add_argument("--format", choices=["text", "json"], default="text")
    princ.set_defaults(func=cmd_principles)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
        configure_logging(config)
        return args.func(args, config)
    except AgentLintError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
