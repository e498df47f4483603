"""Data models for Cycle Roadmap.

Models use snake_case attributes; ``to_dict`` produces the camelCase JSON
shape consumed by the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Unknown:
    """A label-derived field whose source record could not be found."""

    def to_dict(self) -> dict:
        return {}


@dataclass(frozen=True)
class Translated:
    """A label value found in the translation dictionary."""

    name: str

    def to_dict(self) -> dict:
        return {"name": self.name}


@dataclass(frozen=True)
class Raw:
    """A label value with no translation, used verbatim."""

    value: str

    def to_dict(self) -> dict:
        return {"name": self.value}


Resolved = Unknown | Translated | Raw


def resolved_name(resolved: Resolved) -> str | None:
    """Return the display name carried by a resolved label, if any."""
    if isinstance(resolved, Translated):
        return resolved.name
    if isinstance(resolved, Raw):
        return resolved.value
    return None


@dataclass(frozen=True)
class Person:
    """A JIRA user (assignee or reporter)."""

    id: str
    name: str

    @classmethod
    def from_raw(cls, raw: dict | None) -> Person | None:
        if not raw:
            return None
        return cls(
            id=str(raw.get("accountId") or raw.get("key") or raw.get("name") or ""),
            name=raw.get("displayName") or raw.get("name") or "",
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class ValidationItem:
    """A non-fatal data-quality finding on a release or roadmap item."""

    id: str
    code: str
    name: str
    detail: str | None = None
    status: str = "error"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "status": self.status,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class Cycle:
    """A delivery time window, one-to-one with a JIRA sprint."""

    id: str
    name: str
    start: str | None
    end: str | None
    delivery: str | None
    state: str  # "active" | "future" | "closed"

    @classmethod
    def from_sprint(cls, sprint: dict) -> Cycle:
        return cls(
            id=str(sprint.get("id", "")),
            name=sprint.get("name", ""),
            start=sprint.get("startDate"),
            end=sprint.get("endDate"),
            delivery=sprint.get("startDate"),
            state=sprint.get("state", "future"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "start": self.start,
            "end": self.end,
            "delivery": self.delivery,
            "state": self.state,
        }


@dataclass(frozen=True)
class Initiative:
    """A top-level grouping of roadmap items."""

    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


VIRTUAL_INITIATIVE = Initiative(id="uncategorized", name="uncategorized")


@dataclass
class ProgressMetrics:
    """Weeks-based progress derived from release item efforts."""

    weeks: float = 0
    weeks_done: float = 0
    weeks_in_progress: float = 0
    weeks_todo: float = 0
    weeks_not_to_do: float = 0
    weeks_cancelled: float = 0
    weeks_postponed: float = 0
    release_items_count: int = 0
    release_items_done_count: int = 0
    progress: int = 0
    progress_with_in_progress: int = 0
    progress_by_release_items: int = 0
    percentage_not_to_do: int = 0

    def to_dict(self) -> dict:
        return {
            "weeks": self.weeks,
            "weeksDone": self.weeks_done,
            "weeksInProgress": self.weeks_in_progress,
            "weeksTodo": self.weeks_todo,
            "weeksNotToDo": self.weeks_not_to_do,
            "weeksCancelled": self.weeks_cancelled,
            "weeksPostponed": self.weeks_postponed,
            "releaseItemsCount": self.release_items_count,
            "releaseItemsDoneCount": self.release_items_done_count,
            "progress": self.progress,
            "progressWithInProgress": self.progress_with_in_progress,
            "progressByReleaseItems": self.progress_by_release_items,
            "percentageNotToDo": self.percentage_not_to_do,
        }


@dataclass
class CycleMetadata:
    """Calendar position of today within a cycle."""

    start_month: str = ""
    end_month: str = ""
    days_from_start_of_cycle: int = 0
    days_in_cycle: int = 0
    current_day_percentage: int = 0

    def to_dict(self) -> dict:
        return {
            "startMonth": self.start_month,
            "endMonth": self.end_month,
            "daysFromStartOfCycle": self.days_from_start_of_cycle,
            "daysInCycle": self.days_in_cycle,
            "currentDayPercentage": self.current_day_percentage,
        }


@dataclass
class ReleaseItem:
    """The smallest unit of tracked work, parsed from one JIRA issue."""

    id: str
    ticket_id: str
    name: str
    effort: float
    project_id: str | None  # parent roadmap item key
    cycle_id: str | None
    area_ids: list[str]
    teams: list[str]
    status: str
    stage: str
    assignee: Person | None
    is_external: bool
    url: str
    validations: list[ValidationItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticketId": self.ticket_id,
            "name": self.name,
            "effort": self.effort,
            "projectId": self.project_id,
            "cycleId": self.cycle_id,
            "areaIds": list(self.area_ids),
            "teams": list(self.teams),
            "status": self.status,
            "stage": self.stage,
            "assignee": self.assignee.to_dict() if self.assignee else None,
            "isExternal": self.is_external,
            "url": self.url,
            "validations": [v.to_dict() for v in self.validations],
        }


@dataclass
class RoadmapItem:
    """A customer-facing deliverable grouping release items."""

    id: str | None
    name: str
    area: list[Resolved] | None  # None: roadmap item record not found
    theme: Resolved
    initiative_id: str | None
    initiative: Initiative | None
    owning_team: str
    release_items: list[ReleaseItem]
    url: str | None
    is_external: bool = False
    validations: list[ValidationItem] = field(default_factory=list)
    progress: ProgressMetrics | None = None

    def area_dict(self) -> dict:
        if self.area is None:
            return {}
        if not self.area:
            return {"name": []}
        return {"name": ", ".join(resolved_name(a) or "" for a in self.area)}

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "area": self.area_dict(),
            "theme": self.theme.to_dict(),
            "initiativeId": self.initiative_id,
            "initiative": self.initiative.to_dict() if self.initiative else None,
            "owningTeam": self.owning_team,
            "isExternal": self.is_external,
            "releaseItems": [r.to_dict() for r in self.release_items],
            "validations": [v.to_dict() for v in self.validations],
            "url": self.url,
        }
        if self.progress is not None:
            d["progress"] = self.progress.to_dict()
        return d


@dataclass
class InitiativeGroup:
    """All roadmap items of one initiative within a cycle."""

    id: str
    initiative: Initiative
    roadmap_items: list[RoadmapItem]
    progress: ProgressMetrics | None = None

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "initiative": self.initiative.to_dict(),
            "roadmapItems": [r.to_dict() for r in self.roadmap_items],
        }
        if self.progress is not None:
            d["progress"] = self.progress.to_dict()
        return d


@dataclass
class CycleProgress:
    """A cycle annotated with aggregated progress and calendar metadata."""

    cycle: Cycle
    progress: ProgressMetrics
    metadata: CycleMetadata

    def to_dict(self) -> dict:
        return {
            **self.cycle.to_dict(),
            "progress": self.progress.to_dict(),
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class Team:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class Area:
    id: str
    name: str
    teams: list[Team] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "teams": [t.to_dict() for t in self.teams],
        }


@dataclass
class ReleasePlanCheck:
    """Go-to-market plan checks for the release items of a roadmap item."""

    has_scheduled_release: bool = False
    has_global_release_in_backlog: bool = False

    def to_dict(self) -> dict:
        return {
            "hasScheduledRelease": self.has_scheduled_release,
            "hasGlobalReleaseInBacklog": self.has_global_release_in_backlog,
        }


@dataclass
class CycleReleaseItems:
    """External release items of one roadmap item planned in one cycle."""

    cycle_id: str
    release_items: list[ReleaseItem]

    def to_dict(self) -> dict:
        return {
            "sprintId": self.cycle_id,
            "releaseItems": [r.to_dict() for r in self.release_items],
        }


@dataclass
class RoadmapOverviewEntry:
    """One roadmap item across all cycles of the release overview."""

    summary: str
    id: str | None  # initiative id
    name: str | None  # initiative name
    theme: Resolved
    area: dict
    url: str | None
    validations: ReleasePlanCheck
    cycles: list[CycleReleaseItems]

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "id": self.id,
            "name": self.name,
            "theme": self.theme.to_dict(),
            "area": self.area,
            "url": self.url,
            "validations": self.validations.to_dict(),
            "sprints": [c.to_dict() for c in self.cycles],
        }


@dataclass
class CycleDataResult:
    """Complete result of a cycle data fetch."""

    cycle: CycleProgress
    cycles: list[Cycle]
    initiatives: list[InitiativeGroup]
    areas: list[Area]
    teams: list[Team]
    assignees: list[Person]
    stages: list[str]
    jira_url: str


@dataclass
class OverviewResult:
    """Release overview across all cycles of the board."""

    cycle: Cycle
    cycles: list[Cycle]
    roadmap_items: list[RoadmapOverviewEntry]
    stages: list[str]
    jira_url: str
