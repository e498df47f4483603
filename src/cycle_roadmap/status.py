"""Resolve JIRA issue status to a canonical cycle status."""

from datetime import date, datetime, timezone

from cycle_roadmap.config import Config
from cycle_roadmap.models import Cycle

TODO = "todo"
IN_PROGRESS = "inprogress"
DONE = "done"
CANCELLED = "cancelled"
POSTPONED = "postponed"
REPLANNED = "replanned"

FINISHED_STATUSES = (DONE, CANCELLED)
FUTURE_STATUSES = (TODO, IN_PROGRESS, POSTPONED)

_STATUS_ALIASES = {
    "to do": TODO,
    "not started": TODO,
    "open": TODO,
    "in progress": IN_PROGRESS,
    "in-progress": IN_PROGRESS,
    "wip": IN_PROGRESS,
    "work in progress": IN_PROGRESS,
    "completed": DONE,
    "closed": DONE,
    "finished": DONE,
    "canceled": CANCELLED,
    "rescheduled": REPLANNED,
}


def parse_timestamp(value) -> datetime | None:
    """Parse a JIRA date or datetime string into an aware datetime."""
    if not value:
        return None
    text = str(value)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(text[:10]), datetime.min.time())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_status(status: str | None) -> str:
    """Map free-form status names onto canonical status values."""
    if not status or not isinstance(status, str):
        return TODO
    normalized = status.strip().lower()
    return _STATUS_ALIASES.get(normalized, normalized)


def is_finished_status(status: str | None) -> bool:
    return normalize_status(status) in FINISHED_STATUSES


def is_future_status(status: str | None) -> bool:
    return normalize_status(status) in FUTURE_STATUSES


def _is_outside_cycle(issue_sprint: dict | None, cycle: Cycle | None) -> bool:
    # Missing sprint data on either side means the override does not apply.
    if not issue_sprint or cycle is None:
        return False
    sprint_start = parse_timestamp(issue_sprint.get("startDate"))
    cycle_start = parse_timestamp(cycle.start)
    if sprint_start is None or cycle_start is None:
        return False
    if sprint_start < cycle_start:
        return True
    cycle_end = parse_timestamp(cycle.end)
    return cycle_end is not None and sprint_start > cycle_end


def resolve_status(issue_fields: dict, cycle: Cycle | None, config: Config) -> str:
    """Resolve the canonical status of an issue viewed within a cycle.

    An issue whose own sprint starts outside the viewed cycle has been moved
    out of it and is reported as postponed.
    """
    if _is_outside_cycle(issue_fields.get("sprint"), cycle):
        return config.postponed_status

    status_id = (issue_fields.get("status") or {}).get("id")
    if status_id is None:
        return config.default_status
    return config.status_mappings.get(str(status_id), config.default_status)
