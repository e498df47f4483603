"""Validation dictionary for release and roadmap items."""

from dataclasses import dataclass

from cycle_roadmap.models import ValidationItem


@dataclass(frozen=True)
class ValidationRule:
    """A data-quality rule. ``label`` may contain a ``{parameter}`` slot."""

    code: str
    label: str


NO_PROJECT_ID = ValidationRule("noProjectId", "No parent project ID")
MISSING_AREA_LABEL = ValidationRule("missingAreaLabel", "Missing area label")
MISSING_TEAM_LABEL = ValidationRule("missingTeamLabel", "Missing team label")
MISSING_TEAM_TRANSLATION = ValidationRule(
    "missingTeamTranslation", "Missing translation for team: {parameter}"
)
MISSING_ESTIMATE = ValidationRule("missingEstimate", "Missing effort estimate")
TOO_GRANULAR_ESTIMATE = ValidationRule(
    "tooGranularEstimate", "Effort estimate too granular"
)
MISSING_ASSIGNEE = ValidationRule("missingAssignee", "Missing assignee")
MALFORMED_RELEASE_ITEM = ValidationRule(
    "malformedReleaseItem", "Malformed release item: {parameter}"
)


def make_validation(
    item_id: str, rule: ValidationRule, parameter: str | None = None
) -> ValidationItem:
    """Create a validation item for ``item_id`` from a rule."""
    if parameter is None:
        return ValidationItem(id=f"{item_id}-{rule.code}", code=rule.code, name=rule.label)
    return ValidationItem(
        id=f"{item_id}-{rule.code}-{parameter}",
        code=rule.code,
        name=rule.label.format(parameter=parameter),
        detail=parameter,
    )
