"""Tests for progress aggregation."""

from datetime import datetime, timezone

import pytest

from cycle_roadmap.issues import parse_jira_issues
from cycle_roadmap.models import Cycle, ProgressMetrics, ReleaseItem
from cycle_roadmap.progress import (
    aggregate_progress_metrics,
    calculate_cycle_metadata,
    calculate_cycle_progress,
    calculate_release_item_progress,
    sort_by_weeks,
    with_progress,
)


def _item(status, effort, key="R-1"):
    return ReleaseItem(
        id=key,
        ticket_id=key,
        name=key,
        effort=effort,
        project_id="P-1",
        cycle_id="100",
        area_ids=[],
        teams=[],
        status=status,
        stage="internal",
        assignee=None,
        is_external=False,
        url="",
    )


class TestCalculateReleaseItemProgress:
    """Tests for calculate_release_item_progress."""

    def test_empty(self):
        assert calculate_release_item_progress([]) == ProgressMetrics()

    def test_weeks_by_status(self):
        items = [
            _item("done", 2),
            _item("inprogress", 1),
            _item("todo", 0.5),
            _item("postponed", 1),
            _item("cancelled", 0.5),
        ]

        metrics = calculate_release_item_progress(items)

        assert metrics.weeks == 5
        assert metrics.weeks_done == 2
        assert metrics.weeks_in_progress == 1
        assert metrics.weeks_todo == 0.5
        assert metrics.weeks_postponed == 1
        assert metrics.weeks_cancelled == 0.5
        assert metrics.weeks_not_to_do == 1.5
        assert metrics.release_items_count == 5
        assert metrics.release_items_done_count == 1
        assert metrics.progress == 40
        assert metrics.progress_with_in_progress == 60
        assert metrics.progress_by_release_items == 20
        assert metrics.percentage_not_to_do == 30

    def test_replanned_items_are_excluded_from_totals(self):
        items = [_item("done", 1), _item("replanned", 3)]

        metrics = calculate_release_item_progress(items)

        assert metrics.weeks == 1
        assert metrics.release_items_count == 1
        assert metrics.progress == 100

    def test_rounds_half_up(self):
        # 1 of 8 weeks done is 12.5%
        items = [_item("done", 1), _item("todo", 7)]
        assert calculate_release_item_progress(items).progress == 13

    def test_zero_weeks_gives_zero_percentages(self):
        metrics = calculate_release_item_progress([_item("done", 0)])
        assert metrics.progress == 0
        assert metrics.progress_by_release_items == 100


class TestAggregateProgressMetrics:
    """Tests for aggregate_progress_metrics."""

    def test_empty(self):
        assert aggregate_progress_metrics([]) == ProgressMetrics()

    def test_sums_and_recomputes_percentages(self):
        a = calculate_release_item_progress([_item("done", 1), _item("todo", 1)])
        b = calculate_release_item_progress([_item("inprogress", 2)])

        metrics = aggregate_progress_metrics([a, b])

        assert metrics.weeks == 4
        assert metrics.weeks_done == 1
        assert metrics.release_items_count == 3
        assert metrics.progress == 25
        assert metrics.progress_with_in_progress == 75
        assert metrics.progress_by_release_items == 33


class TestCalculateCycleMetadata:
    """Tests for calculate_cycle_metadata."""

    def test_mid_cycle(self, cycle):
        now = datetime(2024, 2, 15, tzinfo=timezone.utc)
        metadata = calculate_cycle_metadata(cycle, now)

        assert metadata.start_month == "Jan"
        assert metadata.end_month == "Mar"
        assert metadata.days_from_start_of_cycle == 45
        assert metadata.days_in_cycle == 90
        assert metadata.current_day_percentage == 50

    def test_future_cycle_counts_days_until_start(self, cycle):
        now = datetime(2023, 12, 1, tzinfo=timezone.utc)
        metadata = calculate_cycle_metadata(cycle, now)
        # 31 of 90 days
        assert metadata.days_from_start_of_cycle == 31
        assert metadata.current_day_percentage == 34

    def test_after_cycle_is_clamped(self, cycle):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert calculate_cycle_metadata(cycle, now).current_day_percentage == 100

    @pytest.mark.parametrize("start,end", [(None, None), ("bad", "2024-01-01")])
    def test_missing_dates(self, start, end):
        cycle = Cycle(id="1", name="c", start=start, end=end, delivery=None, state="future")
        assert calculate_cycle_metadata(cycle).days_in_cycle == 0


class TestTreeAnnotation:
    """Tests for with_progress, calculate_cycle_progress and sort_by_weeks."""

    def _groups(self, config, cycle, make_issue, roadmap_items):
        issues = [
            make_issue(key="RELEASE-001", parent="ROADMAP-456", effort=1, status_id="10001"),
            make_issue(key="RELEASE-002", parent="ROADMAP-456", effort=1, status_id="1"),
            make_issue(key="RELEASE-003", parent="ROADMAP-789", effort=4, status_id="3"),
        ]
        return parse_jira_issues(issues, roadmap_items, cycle, config)

    def test_annotates_roadmap_items_and_initiatives(self, config, cycle, make_issue, roadmap_items):
        groups = self._groups(config, cycle, make_issue, roadmap_items)

        annotated = with_progress(groups)

        assert annotated[0].progress.weeks == 2
        assert annotated[0].progress.progress == 50
        assert annotated[0].roadmap_items[0].progress.weeks_done == 1
        assert annotated[1].progress.weeks_in_progress == 4
        # the input tree is left untouched
        assert groups[0].progress is None
        assert groups[0].roadmap_items[0].progress is None

    def test_cycle_progress(self, config, cycle, make_issue, roadmap_items):
        groups = self._groups(config, cycle, make_issue, roadmap_items)
        now = datetime(2024, 2, 15, tzinfo=timezone.utc)

        cycle_progress = calculate_cycle_progress(cycle, groups, now)

        assert cycle_progress.progress.weeks == 6
        assert cycle_progress.progress.release_items_done_count == 1
        d = cycle_progress.to_dict()
        assert d["id"] == "100"
        assert d["progress"]["weeks"] == 6
        assert d["metadata"]["startMonth"] == "Jan"

    def test_sort_by_weeks(self, config, cycle, make_issue, roadmap_items):
        groups = with_progress(self._groups(config, cycle, make_issue, roadmap_items))
        assert [g.id for g in sort_by_weeks(groups)] == ["init-2", "init-1"]

    def test_sort_by_weeks_without_progress(self, config, cycle, make_issue, roadmap_items):
        groups = self._groups(config, cycle, make_issue, roadmap_items)
        assert [g.id for g in sort_by_weeks(groups)] == ["init-2", "init-1"]
