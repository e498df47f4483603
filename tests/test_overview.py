"""Tests for the release overview."""

from datetime import datetime, timezone

from cycle_roadmap.models import Cycle
from cycle_roadmap.overview import generate_overview, validate_release_plan

NOW = datetime(2024, 2, 15, tzinfo=timezone.utc)
FUTURE_SPRINT = {"id": 101, "startDate": "2024-04-01T00:00:00.000Z", "endDate": "2024-06-30T00:00:00.000Z"}
PAST_SPRINT = {"id": 99, "startDate": "2023-10-01T00:00:00.000Z", "endDate": "2023-12-31T00:00:00.000Z"}


class TestValidateReleasePlan:
    """Tests for validate_release_plan."""

    def test_no_issues(self, config):
        check = validate_release_plan([], config, NOW)
        assert check.has_scheduled_release is False
        assert check.has_global_release_in_backlog is False

    def test_releasable_stage_in_future_sprint(self, config, make_issue):
        issues = [make_issue(summary="Export (s1)", sprint=FUTURE_SPRINT)]
        check = validate_release_plan(issues, config, NOW)
        assert check.has_scheduled_release is True
        assert check.has_global_release_in_backlog is False

    def test_first_stage_is_not_a_scheduled_release(self, config, make_issue):
        issues = [make_issue(summary="Export (s0)", sprint=FUTURE_SPRINT)]
        assert validate_release_plan(issues, config, NOW).has_scheduled_release is False

    def test_past_sprint_is_not_scheduled(self, config, make_issue):
        issues = [make_issue(summary="Export (s2)", sprint=PAST_SPRINT)]
        assert validate_release_plan(issues, config, NOW).has_scheduled_release is False

    def test_final_stage_in_backlog(self, config, make_issue):
        issues = [make_issue(summary="Export (s3+)", status_id="1")]
        check = validate_release_plan(issues, config, NOW)
        assert check.has_global_release_in_backlog is True

    def test_finished_final_stage_is_not_in_backlog(self, config, make_issue):
        issues = [make_issue(summary="Export (s3+)", status_id="10001")]
        assert validate_release_plan(issues, config, NOW).has_global_release_in_backlog is False


class TestGenerateOverview:
    """Tests for generate_overview."""

    def test_lists_external_items_per_cycle(self, config, make_issue, roadmap_items):
        cycles = [
            Cycle(id="100", name="C1", start=None, end=None, delivery=None, state="closed"),
            Cycle(id="101", name="C2", start=None, end=None, delivery=None, state="active"),
        ]
        issues_per_cycle = [
            [
                make_issue(key="REL-1", summary="Export (s1)", parent="ROADMAP-456"),
                make_issue(key="REL-2", summary="Refactor", parent="ROADMAP-456"),
            ],
            [make_issue(key="REL-3", summary="Export (s3)", parent="ROADMAP-456")],
        ]
        issues_by_roadmap_item = {
            "ROADMAP-456": [issue for cycle_issues in issues_per_cycle for issue in cycle_issues]
        }

        entries = generate_overview(
            issues_per_cycle, issues_by_roadmap_item, roadmap_items, cycles, config, NOW
        )

        assert len(entries) == 1
        entry = entries[0]
        assert entry.summary == "Roadmap Item One"
        assert entry.id == "init-1"
        assert entry.name == "Initiative One"
        assert [c.cycle_id for c in entry.cycles] == ["100", "101"]
        assert [i.id for i in entry.cycles[0].release_items] == ["REL-1"]

        d = entry.to_dict()
        assert d["sprints"][1]["sprintId"] == "101"
        assert d["validations"] == {
            "hasScheduledRelease": False,
            "hasGlobalReleaseInBacklog": False,
        }

    def test_skips_roadmap_items_without_external_items(self, config, make_issue, roadmap_items):
        cycles = [Cycle(id="100", name="C1", start=None, end=None, delivery=None, state="active")]
        issues_per_cycle = [[make_issue(summary="Refactor", parent="ROADMAP-456")]]

        assert generate_overview(issues_per_cycle, {}, roadmap_items, cycles, config, NOW) == []
