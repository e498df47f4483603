"""Group parsed issues into the initiative → roadmap item → release item tree."""

from cycle_roadmap.config import Config
from cycle_roadmap.models import (
    VIRTUAL_INITIATIVE,
    Cycle,
    InitiativeGroup,
    ReleaseItem,
    RoadmapItem,
)
from cycle_roadmap.release_items import ReleaseItemParser
from cycle_roadmap.roadmap_items import RoadmapItemParser


def group_by_roadmap_items(
    release_items: list[ReleaseItem], parser: RoadmapItemParser
) -> list[RoadmapItem]:
    """One roadmap item per distinct parent key, in first-seen order."""
    grouped: dict[str | None, list[ReleaseItem]] = {}
    for item in release_items:
        grouped.setdefault(item.project_id, []).append(item)
    return [parser.parse(project_id, items) for project_id, items in grouped.items()]


def group_by_initiatives(roadmap_items: list[RoadmapItem]) -> list[InitiativeGroup]:
    """One group per distinct initiative, in first-seen order.

    Roadmap items without a resolved initiative fall into the virtual one.
    """
    groups: dict[str, InitiativeGroup] = {}
    for roadmap_item in roadmap_items:
        initiative = roadmap_item.initiative or VIRTUAL_INITIATIVE
        group = groups.get(initiative.id)
        if group is None:
            group = InitiativeGroup(id=initiative.id, initiative=initiative, roadmap_items=[])
            groups[initiative.id] = group
        group.roadmap_items.append(roadmap_item)
    return list(groups.values())


def parse_jira_issues(
    issues: list[dict],
    roadmap_items: dict[str, dict],
    cycle: Cycle | None,
    config: Config,
) -> list[InitiativeGroup]:
    """Turn the raw issues of one cycle into initiative groups.

    Args:
        issues: Raw issue dicts (``{"key": ..., "fields": {...}}``)
        roadmap_items: Raw roadmap item records keyed by issue key
        cycle: The cycle the issues are viewed in
        config: Engine configuration

    Returns:
        Initiative groups; empty when there are no issues
    """
    if not issues:
        return []

    release_item_parser = ReleaseItemParser(cycle, config)
    roadmap_item_parser = RoadmapItemParser(roadmap_items, config)

    release_items = [release_item_parser.parse(issue) for issue in issues]
    return group_by_initiatives(group_by_roadmap_items(release_items, roadmap_item_parser))
