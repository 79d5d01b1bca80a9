"""
Agent Lint configuration — environment-driven settings in one place.
"""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_lint.errors import ConfigError


class LinterConfig(BaseSettings):
    """Tunables for the response linter, read from AGENT_LINT_* variables."""

    model_config = SettingsConfigDict(env_prefix="AGENT_LINT_")

    profile: str = "full"
    strict: bool = False
    review_threshold: float = Field(ge=0.0, le=1.0, default=0.5)
    weight_tolerance: float = Field(ge=0.0, default=0.01)
    clock_skew_seconds: int = Field(ge=0, default=300)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.strip().upper()


def load_config() -> LinterConfig:
    """Build a LinterConfig from the environment. Raises ConfigError on bad values."""
    try:
        return LinterConfig()
    except ValidationError as e:
        raise ConfigError(f"Invalid AGENT_LINT_* setting: {e}") from e


def configure_logging(config: LinterConfig) -> None:
    """Install a basic stderr handler at the configured level."""
    level = getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
