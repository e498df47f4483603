"""Cycle data fetching and processing."""

import logging
from datetime import datetime

from cycle_roadmap.config import Config, config_exists, load_config
from cycle_roadmap.exceptions import (
    ConfigNotFoundError,
    CycleNotFoundError,
    CycleRoadmapError,
    InvalidConfigError,
    InvalidJqlError,
    JiraAuthError,
    JiraConnectionError,
    JiraRateLimitError,
)
from cycle_roadmap.issues import parse_jira_issues
from cycle_roadmap.jira_client import (
    AuthenticationError,
    JiraClient,
    RateLimitError,
)
from cycle_roadmap.jira_client import (
    ConnectionError as JiraClientConnectionError,
)
from cycle_roadmap.labels import extract_labels_with_prefix, jira_base_url, translate_label
from cycle_roadmap.models import (
    Area,
    Cycle,
    CycleDataResult,
    OverviewResult,
    Person,
    ReleaseItem,
    Team,
)
from cycle_roadmap.overview import generate_overview
from cycle_roadmap.progress import calculate_cycle_progress, sort_by_weeks, with_progress

logger = logging.getLogger(__name__)

UNASSIGNED_AREA_ID = "unassigned-teams"
UNASSIGNED_AREA_NAME = "Unassigned Teams"


def select_cycle(cycles: list[Cycle], cycle_id: str | None = None) -> Cycle:
    """Pick the requested cycle, else the active one, else the latest one.

    Raises:
        CycleNotFoundError: If there are no cycles or the id is unknown
    """
    if cycle_id is not None:
        for cycle in cycles:
            if cycle.id == str(cycle_id):
                return cycle
        raise CycleNotFoundError(f"No sprint found with id {cycle_id}.")

    if not cycles:
        raise CycleNotFoundError("No sprints found on the configured board.")

    for cycle in cycles:
        if cycle.state == "active":
            return cycle
    return cycles[-1]


def _unique_labels(labels_per_issue: list[list[str]], prefix: str) -> list[str]:
    seen: dict[str, None] = {}
    for labels in labels_per_issue:
        for value in extract_labels_with_prefix(labels, prefix):
            seen.setdefault(value, None)
    return list(seen)


def collect_teams(labels_per_issue: list[list[str]], config: Config) -> list[Team]:
    return [
        Team(id=team_id, name=translate_label("team", team_id, config))
        for team_id in _unique_labels(labels_per_issue, "team")
    ]


def collect_areas(labels_per_issue: list[list[str]], teams: list[Team], config: Config) -> list[Area]:
    """Areas with their teams; a team belongs to the first area prefixing its id."""
    areas = [
        Area(id=area_id, name=translate_label("area", area_id, config))
        for area_id in _unique_labels(labels_per_issue, "area")
    ]

    unassigned: list[Team] = []
    for team in teams:
        area = next((a for a in areas if team.id.startswith(a.id)), None)
        if area is None:
            unassigned.append(team)
        else:
            area.teams.append(team)

    if unassigned:
        areas.append(Area(id=UNASSIGNED_AREA_ID, name=UNASSIGNED_AREA_NAME, teams=unassigned))
    return areas


def collect_assignees(release_items: list[ReleaseItem]) -> list[Person]:
    seen: dict[str, Person] = {}
    for item in release_items:
        if item.assignee is not None:
            seen.setdefault(item.assignee.id, item.assignee)
    return list(seen.values())


def _load_config() -> Config:
    if not config_exists():
        raise ConfigNotFoundError(
            "Configuration not found. Create ~/.cycle-roadmap/config.toml to set up."
        )

    try:
        return load_config()
    except ValueError as e:
        raise InvalidConfigError(f"Invalid configuration: {e}")


def _translate_client_error(e: Exception) -> CycleRoadmapError:
    if isinstance(e, AuthenticationError):
        return JiraAuthError(
            "JIRA authentication failed. Check your credentials in "
            "~/.cycle-roadmap/config.toml."
        )
    if isinstance(e, RateLimitError):
        return JiraRateLimitError(
            "JIRA rate limit exceeded. Please wait a moment and try again."
        )
    if isinstance(e, JiraClientConnectionError):
        return JiraConnectionError(str(e))
    return InvalidJqlError(f"Invalid JQL query: {e}.")


_CLIENT_ERRORS = (AuthenticationError, RateLimitError, JiraClientConnectionError, ValueError)


def fetch_cycle_data(cycle_id: str | None = None, now: datetime | None = None) -> CycleDataResult:
    """Fetch and process the data of one cycle from JIRA.

    Args:
        cycle_id: Sprint id; defaults to the active sprint
        now: Reference time for cycle metadata

    Returns:
        CycleDataResult with the initiative tree and progress annotations

    Raises:
        ConfigNotFoundError: If config file not found
        InvalidConfigError: If config is invalid
        JiraAuthError: If JIRA authentication fails
        JiraRateLimitError: If rate limited
        JiraConnectionError: If cannot connect
        InvalidJqlError: If a query is rejected
        CycleNotFoundError: If the cycle does not exist
    """
    config = _load_config()
    client = JiraClient(config)

    try:
        raw_sprints = client.get_sprints(config.board_id)
        cycles = [Cycle.from_sprint(s) for s in raw_sprints]
        cycle = select_cycle(cycles, cycle_id)
        logger.info("fetching cycle %s (%s)", cycle.id, cycle.name)

        roadmap_items = client.search_roadmap_items()
        issues = client.search_release_items(cycle.id)
    except _CLIENT_ERRORS as e:
        raise _translate_client_error(e) from e

    logger.info(
        "parsing %d release items against %d roadmap items", len(issues), len(roadmap_items)
    )

    groups = sort_by_weeks(with_progress(parse_jira_issues(issues, roadmap_items, cycle, config)))
    release_items = [
        item for group in groups for roadmap_item in group.roadmap_items for item in roadmap_item.release_items
    ]

    labels_per_issue = [issue.get("fields", {}).get("labels") or [] for issue in issues]
    labels_per_issue += [record.get("labels") or [] for record in roadmap_items.values()]
    teams = collect_teams(labels_per_issue, config)

    return CycleDataResult(
        cycle=calculate_cycle_progress(cycle, groups, now),
        cycles=cycles,
        initiatives=groups,
        areas=collect_areas(labels_per_issue, teams, config),
        teams=teams,
        assignees=collect_assignees(release_items),
        stages=list(config.stages),
        jira_url=jira_base_url(config),
    )


def cycle_data_to_dict(result: CycleDataResult) -> dict:
    """Convert CycleDataResult to a JSON-serializable dict."""
    return {
        "cycle": result.cycle.to_dict(),
        "cycles": [c.to_dict() for c in result.cycles],
        "initiatives": [g.to_dict() for g in result.initiatives],
        "areas": [a.to_dict() for a in result.areas],
        "teams": [t.to_dict() for t in result.teams],
        "assignees": [p.to_dict() for p in result.assignees],
        "stages": list(result.stages),
        "jira_url": result.jira_url,
    }


def fetch_overview(now: datetime | None = None) -> OverviewResult:
    """Fetch the release overview of every cycle on the board.

    Raises the same errors as :func:`fetch_cycle_data`.
    """
    config = _load_config()
    client = JiraClient(config)

    try:
        cycles = [Cycle.from_sprint(s) for s in client.get_sprints(config.board_id)]
        cycle = select_cycle(cycles)
        roadmap_items = client.search_roadmap_items()
        issues_by_roadmap_item = client.search_release_items_by_roadmap_item()
        issues_per_cycle = [client.search_release_items(c.id) for c in cycles]
    except _CLIENT_ERRORS as e:
        raise _translate_client_error(e) from e

    logger.info("building overview of %d cycles", len(cycles))

    return OverviewResult(
        cycle=cycle,
        cycles=cycles,
        roadmap_items=generate_overview(
            issues_per_cycle, issues_by_roadmap_item, roadmap_items, cycles, config, now
        ),
        stages=list(config.stages),
        jira_url=jira_base_url(config),
    )


def overview_to_dict(result: OverviewResult) -> dict:
    """Convert OverviewResult to a JSON-serializable dict."""
    return {
        "cycle": result.cycle.to_dict(),
        "cycles": [c.to_dict() for c in result.cycles],
        "roadmapItems": [entry.to_dict() for entry in result.roadmap_items],
        "stages": list(result.stages),
        "jira_url": result.jira_url,
    }
