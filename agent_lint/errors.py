"""Exceptions raised when a lint input cannot be used at all.

Findings about a response are data (see agent_lint.models.findings), not
exceptions. These are reserved for inputs the linter cannot work with.
"""


class AgentLintError(Exception):
    """Base class for all agent_lint errors."""
    pass


class ResponseParseError(AgentLintError):
    """Raised when a response body is not valid JSON."""
    pass


class UnknownProfileError(AgentLintError):
    """Raised when a profile name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown profile '{name}'")


class ProfileLoadError(AgentLintError):
    """Raised when a profile file cannot be read or validated."""
    pass


class RootNotFoundError(AgentLintError):
    """Raised when the profile root path does not exist in the response."""

    def __init__(self, root: str):
        self.root = root
        super().__init__(f"Root path '{root}' not found in response")


class ConfigError(AgentLintError):
    """Raised when an AGENT_LINT_* environment setting is invalid."""
    pass
