"""Parse roadmap item records and attach their release items."""

import logging

from cycle_roadmap.config import Config
from cycle_roadmap.labels import (
    extract_labels_with_prefix,
    jira_link,
    resolve_label,
    translate_label,
)
from cycle_roadmap.models import (
    VIRTUAL_INITIATIVE,
    Initiative,
    ReleaseItem,
    RoadmapItem,
    Unknown,
)

logger = logging.getLogger(__name__)

VIRTUAL_THEME = "virtual"
UNKNOWN_TEAM = "unknown"


def parse_roadmap_item_name(summary: str) -> str:
    """Strip a leading ``[...]`` prefix and a trailing ``[...]`` suffix."""
    end_of_prefix = summary.find("]") + 1 if summary.startswith("[") else 0
    beginning_of_suffix = summary.rfind("[")
    end = beginning_of_suffix if beginning_of_suffix > 0 else len(summary)
    return summary[end_of_prefix:end].strip()


def resolve_initiative_id(labels: list[str]) -> str | None:
    """Initiative id of a roadmap item; ``theme:virtual`` forces the virtual one."""
    if VIRTUAL_THEME in extract_labels_with_prefix(labels, "theme"):
        return VIRTUAL_INITIATIVE.id
    initiatives = extract_labels_with_prefix(labels, "initiative")
    return initiatives[0] if initiatives else None


def resolve_initiative(initiative_id: str | None, config: Config) -> Initiative | None:
    if initiative_id is None:
        return None
    if initiative_id == VIRTUAL_INITIATIVE.id:
        return VIRTUAL_INITIATIVE
    return Initiative(
        id=initiative_id,
        name=translate_label("initiative", initiative_id, config),
    )


class RoadmapItemParser:
    """Builds roadmap items from the raw roadmap item records of a snapshot."""

    def __init__(self, roadmap_items: dict[str, dict], config: Config) -> None:
        self.roadmap_items = roadmap_items
        self.config = config

    def parse(self, project_id: str | None, release_items: list[ReleaseItem] | None = None) -> RoadmapItem:
        release_items = list(release_items or [])
        record = self.roadmap_items.get(project_id) if project_id is not None else None

        if record is None:
            logger.info(
                "not-found-roadmap-item project_id=%s ticket_ids=%s",
                project_id,
                [item.ticket_id for item in release_items],
            )
            return RoadmapItem(
                id=project_id,
                name="",
                area=None,
                theme=Unknown(),
                initiative_id=None,
                initiative=None,
                owning_team=UNKNOWN_TEAM,
                release_items=release_items,
                url=jira_link(project_id, self.config) if project_id is not None else None,
            )

        labels = record.get("labels") or []
        themes = extract_labels_with_prefix(labels, "theme")
        initiative_id = resolve_initiative_id(labels)

        return RoadmapItem(
            id=project_id,
            name=parse_roadmap_item_name(record.get("summary") or ""),
            area=[
                resolve_label("area", area, self.config)
                for area in extract_labels_with_prefix(labels, "area")
            ],
            theme=resolve_label("theme", themes[0] if themes else None, self.config),
            initiative_id=initiative_id,
            initiative=resolve_initiative(initiative_id, self.config),
            owning_team=self._owning_team(release_items),
            release_items=release_items,
            url=jira_link(project_id, self.config),
            # No-pre-release-allowed policy is not applied yet; both fields
            # keep their defaults.
            is_external=False,
            validations=[],
        )

    def _owning_team(self, release_items: list[ReleaseItem]) -> str:
        # Release item teams are already translated.
        for item in release_items:
            if item.teams:
                return item.teams[0]
        return UNKNOWN_TEAM
