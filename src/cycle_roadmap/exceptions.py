"""Exception hierarchy for Cycle Roadmap.

The parsing engine never raises for malformed issue data; these exceptions
cover configuration and data-source failures around it.
"""


class CycleRoadmapError(Exception):
    """Base exception for cycle roadmap errors."""

    pass


class ConfigNotFoundError(CycleRoadmapError):
    """Configuration file not found."""

    pass


class InvalidConfigError(CycleRoadmapError):
    """Configuration is invalid."""

    pass


class JiraAuthError(CycleRoadmapError):
    """JIRA authentication failed."""

    pass


class JiraConnectionError(CycleRoadmapError):
    """Cannot connect to JIRA server."""

    pass


class JiraRateLimitError(CycleRoadmapError):
    """JIRA rate limit exceeded."""

    pass


class InvalidJqlError(CycleRoadmapError):
    """Invalid JQL query."""

    pass


class CycleNotFoundError(CycleRoadmapError):
    """No sprint matches the requested cycle."""

    pass
