"""
Agent Lint API — FastAPI endpoints.

Exposes the linter over HTTP for:
- Vocabulary inspection (principles and their fields)
- Built-in profiles
- Response linting
- Guidance document checks
"""

import logging
from typing import Any, List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from agent_lint.config import LinterConfig, load_config
from agent_lint.docs.markdown import check_document
from agent_lint.errors import ResponseParseError, RootNotFoundError, UnknownProfileError
from agent_lint.linter.engine import ResponseLinter
from agent_lint.models.principle import Principle
from agent_lint.models.profile import LintProfile
from agent_lint.vocabulary.catalog import PRINCIPLES, get_profile, list_profiles

logger = logging.getLogger(__name__)


# --- Request Models ---

class LintRequest(BaseModel):
    response: Any
    profile: Optional[Union[str, LintProfile]] = None
    principles: Optional[List[Principle]] = None
    strict: Optional[bool] = None
    root: Optional[str] = None
    expect_error: Optional[bool] = None


class DocumentCheckRequest(BaseModel):
    markdown: str
    lint_examples: bool = False


def resolve_profile(req: LintRequest, config: LinterConfig) -> LintProfile:
    """Build the effective profile from a named or inline profile plus overrides."""
    if isinstance(req.profile, LintProfile):
        profile = req.profile
    elif req.principles:
        profile = LintProfile(name="custom", principles=req.principles)
    else:
        profile = get_profile(req.profile or config.profile)

    updates = {}
    if req.principles and isinstance(req.profile, (str, LintProfile)):
        updates["principles"] = req.principles
    if req.strict is not None:
        updates["strict"] = req.strict
    if req.root is not None:
        updates["root"] = req.root
    if req.expect_error is not None:
        updates["expect_error"] = req.expect_error
    if updates:
        profile = LintProfile.model_validate({**profile.model_dump(), **updates})
    return profile


# --- Application Factory ---

def create_app(
    linter: Optional[ResponseLinter] = None,
    config: Optional[LinterConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Agent Lint API",
        description="Checks JSON API responses for AI-agent friendly conventions",
        version="0.1.0",
    )

    cfg = config or (linter.config if linter else load_config())
    rl = linter or ResponseLinter(cfg)

    app.state.config = cfg
    app.state.linter = rl

    @app.get("/health")
    def health():
        return {"status": "ok", "principles": len(PRINCIPLES)}

    # === VOCABULARY ===

    @app.get("/principles")
    def list_principles():
        """Every principle and its expected fields."""
        return [spec.model_dump(mode="json") for spec in PRINCIPLES.values()]

    @app.get("/principles/{principle_id}")
    def get_principle(principle_id: str):
        try:
            principle = Principle(principle_id)
        except ValueError:
            raise HTTPException(404, "Principle not found")
        return PRINCIPLES[principle].model_dump(mode="json")

    @app.get("/profiles")
    def get_profiles():
        """Built-in profiles."""
        return [p.model_dump(mode="json") for p in list_profiles()]

    # === LINTING ===

    @app.post("/lint")
    def lint_response(req: LintRequest):
        """Lint one response."""
        try:
            profile = resolve_profile(req, cfg)
        except UnknownProfileError as e:
            raise HTTPException(404, str(e))

        try:
            report = rl.lint(req.response, profile)
        except (ResponseParseError, RootNotFoundError) as e:
            raise HTTPException(422, str(e))
        return report.model_dump(mode="json")

    @app.post("/docs/check")
    def check_markdown(req: DocumentCheckRequest):
        """Check a Markdown guidance document."""
        report = check_document(req.markdown, lint_examples=req.lint_examples, linter=rl)
        return report.model_dump(mode="json")

    return app


# Default application instance
app = create_app()
