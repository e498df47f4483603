"""JIRA API client with retry logic."""

import logging

from jira import JIRA, JIRAError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cycle_roadmap.config import Config

logger = logging.getLogger(__name__)

RELEASE_ITEM_FIELDS = [
    "summary",
    "status",
    "parent",
    "assignee",
    "reporter",
    "labels",
    "created",
    "updated",
]
ROADMAP_ITEM_FIELDS = ["summary", "labels"]


class RateLimitError(Exception):
    """Raised when JIRA API rate limit is hit."""

    pass


class AuthenticationError(Exception):
    """Raised when JIRA authentication fails."""

    pass


class ConnectionError(Exception):
    """Raised when JIRA server cannot be reached."""

    pass


def _translate_jira_error(e: JIRAError) -> Exception | None:
    if e.status_code == 429:
        return RateLimitError("Rate limited by JIRA. Retrying with exponential backoff...")
    if e.status_code == 401:
        return AuthenticationError("Authentication failed. Check your email and API token.")
    return None


class JiraClient:
    """Client for fetching the sprint and issue snapshot from JIRA Cloud."""

    def __init__(self, config: Config) -> None:
        """Initialize JIRA client with configuration."""
        self.config = config
        self._client: JIRA | None = None

    def _get_client(self) -> JIRA:
        """Get or create JIRA client instance."""
        if self._client is None:
            try:
                self._client = JIRA(
                    server=self.config.jira_url,
                    basic_auth=(self.config.jira_email, self.config.jira_api_token),
                    timeout=15,
                )
            except JIRAError as e:
                if e.status_code == 401:
                    raise AuthenticationError(
                        "Authentication failed. Check your email and API token."
                    ) from e
                raise
            except Exception as e:
                error_msg = str(e).lower()
                if "connection" in error_msg or "resolve" in error_msg or "timeout" in error_msg:
                    raise ConnectionError(
                        f"Cannot connect to JIRA server at {self.config.jira_url}. "
                        "Check the URL and your network connection."
                    ) from e
                raise
        return self._client

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True,
    )
    def search_issues(self, jql: str, fields: list[str]) -> list[dict]:
        """Search for issues and return them as raw dicts.

        Raises:
            RateLimitError: If rate limited (will be retried)
            AuthenticationError: If authentication fails
            ValueError: If the JQL is rejected
        """
        client = self._get_client()
        logger.debug("searching issues: %s", jql)

        try:
            result = client.enhanced_search_issues(jql, maxResults=0, fields=fields)
        except JIRAError as e:
            translated = _translate_jira_error(e)
            if translated is not None:
                raise translated from e
            if e.status_code == 400:
                raise ValueError(f"Invalid JQL query: {e.text}") from e
            raise

        return [self._issue_to_dict(issue) for issue in result]

    def search_release_items(self, cycle_id: str) -> list[dict]:
        """All release items planned in a sprint."""
        fields = [*RELEASE_ITEM_FIELDS, self.config.effort_field, self.config.sprint_field]
        return self.search_issues(f'issuetype = "Release Item" AND sprint = {cycle_id}', fields)

    def search_release_items_by_roadmap_item(self) -> dict[str, list[dict]]:
        """All release items with a parent, grouped by the parent key."""
        fields = [*RELEASE_ITEM_FIELDS, self.config.sprint_field]
        issues = self.search_issues(
            'issuetype = "Release Item" AND parent is not EMPTY', fields
        )
        grouped: dict[str, list[dict]] = {}
        for issue in issues:
            parent = issue["fields"].get("parent") or {}
            if parent.get("key"):
                grouped.setdefault(parent["key"], []).append(issue)
        return grouped

    def search_roadmap_items(self) -> dict[str, dict]:
        """Roadmap item records keyed by issue key."""
        issues = self.search_issues('issuetype = "Roadmap Item"', ROADMAP_ITEM_FIELDS)
        return {
            issue["key"]: {
                "summary": issue["fields"].get("summary", ""),
                "labels": issue["fields"].get("labels", []),
            }
            for issue in issues
        }

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True,
    )
    def get_sprints(self, board_id: int) -> list[dict]:
        """Get all sprints of a board as raw dicts."""
        client = self._get_client()
        try:
            sprints = client.sprints(board_id, maxResults=100)
        except JIRAError as e:
            translated = _translate_jira_error(e)
            if translated is not None:
                raise translated from e
            raise
        return [sprint.raw for sprint in sprints]

    def _issue_to_dict(self, issue) -> dict:
        """Convert JIRA issue object to dictionary.

        The sprint custom field is split into ``sprint`` (the current, open
        sprint) and ``closedSprints``.
        """
        fields = dict(issue.raw.get("fields", {}))
        if "sprint" not in fields:
            sprints = [s for s in fields.get(self.config.sprint_field) or [] if isinstance(s, dict)]
            open_sprints = [s for s in sprints if s.get("state") != "closed"]
            fields["sprint"] = open_sprints[-1] if open_sprints else None
            fields["closedSprints"] = [s for s in sprints if s.get("state") == "closed"]
        return {
            "key": issue.key,
            "fields": fields,
        }
