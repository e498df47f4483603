"""Parse JIRA issues into release items."""

import logging

from cycle_roadmap.config import Config
from cycle_roadmap.labels import (
    extract_labels_with_prefix,
    jira_link,
    translate_label_without_fallback,
)
from cycle_roadmap.models import Cycle, Person, ReleaseItem, ValidationItem
from cycle_roadmap.stages import INTERNAL_STAGE, is_external_stage, resolve_stage, strip_stage
from cycle_roadmap.status import resolve_status
from cycle_roadmap.validations import (
    MALFORMED_RELEASE_ITEM,
    MISSING_AREA_LABEL,
    MISSING_ASSIGNEE,
    MISSING_ESTIMATE,
    MISSING_TEAM_LABEL,
    MISSING_TEAM_TRANSLATION,
    NO_PROJECT_ID,
    TOO_GRANULAR_ESTIMATE,
    make_validation,
)

logger = logging.getLogger(__name__)


class ReleaseItemParser:
    """Parser for the release items of one cycle.

    Build one instance per (cycle, config) pair and call ``parse`` per issue.
    """

    def __init__(self, cycle: Cycle | None, config: Config) -> None:
        self.cycle = cycle
        self.config = config

    def parse(self, issue: dict) -> ReleaseItem:
        """Parse one raw issue. Data problems become validations, never errors."""
        key = issue.get("key", "")
        try:
            return self._parse(key, issue.get("fields") or {})
        except (AttributeError, TypeError, ValueError, KeyError) as e:
            logger.warning("malformed release item %s: %s", key, e)
            return self._malformed(key, str(e))

    def _parse(self, key: str, fields: dict) -> ReleaseItem:
        labels = fields.get("labels") or []
        summary = fields.get("summary") or ""

        project_id, project_validations = self._collect_project_id(key, fields)
        area_ids, area_validations = self._collect_area_ids(key, labels)
        teams, team_validations = self._collect_teams(key, labels)
        effort, effort_validations = self._collect_effort(key, fields)
        assignee, assignee_validations = self._collect_assignee(key, fields)
        stage = resolve_stage(summary, self.config)

        logger.debug("parsed release item %s (stage=%s, parent=%s)", key, stage, project_id)

        return ReleaseItem(
            id=key,
            ticket_id=key,
            name=strip_stage(summary, self.config),
            effort=effort,
            project_id=project_id,
            cycle_id=self.cycle.id if self.cycle else None,
            area_ids=area_ids,
            teams=teams,
            status=resolve_status(fields, self.cycle, self.config),
            stage=stage,
            assignee=assignee,
            is_external=is_external_stage(stage, self.config),
            url=jira_link(key, self.config),
            validations=[
                *project_validations,
                *area_validations,
                *team_validations,
                *effort_validations,
                *assignee_validations,
            ],
        )

    def _malformed(self, key: str, reason: str) -> ReleaseItem:
        return ReleaseItem(
            id=key,
            ticket_id=key,
            name="",
            effort=0,
            project_id=None,
            cycle_id=self.cycle.id if self.cycle else None,
            area_ids=[],
            teams=[],
            status=self.config.default_status,
            stage=INTERNAL_STAGE,
            assignee=None,
            is_external=False,
            url=jira_link(key, self.config),
            validations=[make_validation(key, MALFORMED_RELEASE_ITEM, reason)],
        )

    def _collect_project_id(self, key: str, fields: dict) -> tuple[str | None, list[ValidationItem]]:
        parent_key = (fields.get("parent") or {}).get("key")
        if not parent_key:
            return None, [make_validation(key, NO_PROJECT_ID)]
        return parent_key, []

    def _collect_area_ids(self, key: str, labels: list[str]) -> tuple[list[str], list[ValidationItem]]:
        area_ids = extract_labels_with_prefix(labels, "area")
        if not area_ids:
            return [], [make_validation(key, MISSING_AREA_LABEL)]
        return area_ids, []

    def _collect_teams(self, key: str, labels: list[str]) -> tuple[list[str], list[ValidationItem]]:
        team_labels = extract_labels_with_prefix(labels, "team")
        if not team_labels:
            return [], [make_validation(key, MISSING_TEAM_LABEL)]

        teams: list[str] = []
        validations: list[ValidationItem] = []
        for team in team_labels:
            translated = translate_label_without_fallback("team", team, self.config)
            if translated is None:
                teams.append(team)
                validations.append(make_validation(key, MISSING_TEAM_TRANSLATION, team))
            else:
                teams.append(translated)
        return teams, validations

    def _collect_effort(self, key: str, fields: dict) -> tuple[float, list[ValidationItem]]:
        estimate = fields.get(self.config.effort_field)
        if estimate is None or estimate == "" or isinstance(estimate, bool):
            return 0, [make_validation(key, MISSING_ESTIMATE)]

        if not isinstance(estimate, (int, float)):
            try:
                estimate = float(estimate)
            except (TypeError, ValueError):
                return 0, [make_validation(key, MISSING_ESTIMATE)]

        if estimate % 0.5 != 0:
            return estimate, [make_validation(key, TOO_GRANULAR_ESTIMATE)]
        return estimate, []

    def _collect_assignee(self, key: str, fields: dict) -> tuple[Person | None, list[ValidationItem]]:
        person = Person.from_raw(fields.get("assignee")) or Person.from_raw(fields.get("reporter"))
        if person is None:
            return None, [make_validation(key, MISSING_ASSIGNEE)]
        return person, []
