"""Release overview across cycles with go-to-market plan checks."""

from datetime import datetime, timezone

from cycle_roadmap.config import Config
from cycle_roadmap.models import (
    Cycle,
    CycleReleaseItems,
    ReleasePlanCheck,
    RoadmapOverviewEntry,
)
from cycle_roadmap.release_items import ReleaseItemParser
from cycle_roadmap.roadmap_items import RoadmapItemParser
from cycle_roadmap.stages import is_final_release_stage, is_releasable_stage, resolve_stage
from cycle_roadmap.status import is_future_status, parse_timestamp, resolve_status


def is_scheduled_for_future(fields: dict, now: datetime) -> bool:
    sprint = fields.get("sprint")
    if not sprint:
        return False
    end = parse_timestamp(sprint.get("endDate"))
    return end is not None and now < end


def is_in_backlog(fields: dict, config: Config) -> bool:
    return is_future_status(resolve_status(fields, None, config)) and not fields.get("sprint")


def validate_release_plan(
    issues: list[dict], config: Config, now: datetime | None = None
) -> ReleasePlanCheck:
    """Check that a roadmap item has its releases planned.

    ``has_scheduled_release``: some releasable-stage item sits in a future
    sprint. ``has_global_release_in_backlog``: the final-stage item is either
    in the backlog or in a future sprint.
    """
    now = now or datetime.now(timezone.utc)
    check = ReleasePlanCheck()
    for issue in issues:
        fields = issue.get("fields") or {}
        stage = resolve_stage(fields.get("summary"), config)
        in_future_sprint = is_scheduled_for_future(fields, now)
        if in_future_sprint and is_releasable_stage(stage, config):
            check.has_scheduled_release = True
        if (in_future_sprint or is_in_backlog(fields, config)) and is_final_release_stage(stage, config):
            check.has_global_release_in_backlog = True
    return check


def generate_overview(
    issues_per_cycle: list[list[dict]],
    issues_by_roadmap_item: dict[str, list[dict]],
    roadmap_items: dict[str, dict],
    cycles: list[Cycle],
    config: Config,
    now: datetime | None = None,
) -> list[RoadmapOverviewEntry]:
    """Build the release overview for every known roadmap item.

    ``issues_per_cycle`` is parallel to ``cycles``. Only external release
    items are listed; roadmap items without any are left out.
    """
    roadmap_item_parser = RoadmapItemParser(roadmap_items, config)

    release_items_per_cycle = []
    for cycle, cycle_issues in zip(cycles, issues_per_cycle):
        parser = ReleaseItemParser(cycle, config)
        release_items_per_cycle.append((cycle, [parser.parse(issue) for issue in cycle_issues]))

    entries = []
    for roadmap_item_id in roadmap_items:
        roadmap_item = roadmap_item_parser.parse(roadmap_item_id)
        cycle_groups = []
        for cycle, release_items in release_items_per_cycle:
            external = [
                item
                for item in release_items
                if item.project_id == roadmap_item_id and item.is_external
            ]
            if external:
                cycle_groups.append(CycleReleaseItems(cycle_id=cycle.id, release_items=external))

        if not cycle_groups:
            continue

        entries.append(
            RoadmapOverviewEntry(
                summary=roadmap_item.name,
                id=roadmap_item.initiative.id if roadmap_item.initiative else None,
                name=roadmap_item.initiative.name if roadmap_item.initiative else None,
                theme=roadmap_item.theme,
                area=roadmap_item.area_dict(),
                url=roadmap_item.url,
                validations=validate_release_plan(
                    issues_by_roadmap_item.get(roadmap_item_id, []), config, now
                ),
                cycles=cycle_groups,
            )
        )
    return entries
