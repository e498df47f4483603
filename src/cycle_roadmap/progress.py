"""Bottom-up progress aggregation.

Progress is computed from release item efforts ("weeks") grouped by
canonical status, then rolled up to roadmap items, initiatives and the cycle.
"""

import math
from dataclasses import replace
from datetime import datetime, timezone

from cycle_roadmap.models import (
    Cycle,
    CycleMetadata,
    CycleProgress,
    InitiativeGroup,
    ProgressMetrics,
    ReleaseItem,
    RoadmapItem,
)
from cycle_roadmap.status import (
    CANCELLED,
    DONE,
    IN_PROGRESS,
    POSTPONED,
    REPLANNED,
    TODO,
    normalize_status,
    parse_timestamp,
)


def _round_half_up(number: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(number * factor + 0.5) / factor


def _percentage(part: float, whole: float) -> int:
    if whole <= 0:
        return 0
    return max(0, int(_round_half_up(part / whole * 100)))


def _parse_effort(item: ReleaseItem) -> float:
    try:
        effort = float(item.effort)
    except (TypeError, ValueError):
        return 0
    return 0 if math.isnan(effort) else effort


def _sum_efforts(items: list[ReleaseItem], status: str | None = None) -> float:
    selected = items if status is None else [i for i in items if normalize_status(i.status) == status]
    return _round_half_up(sum(_parse_effort(i) for i in selected), 2)


def calculate_release_item_progress(release_items: list[ReleaseItem]) -> ProgressMetrics:
    """Progress metrics for a flat list of release items.

    Replanned items count towards neither the total weeks nor the item count.
    """
    if not release_items:
        return ProgressMetrics()

    planned = [i for i in release_items if normalize_status(i.status) != REPLANNED]
    weeks = _sum_efforts(planned)
    weeks_done = _sum_efforts(release_items, DONE)
    weeks_in_progress = _sum_efforts(release_items, IN_PROGRESS)
    weeks_postponed = _sum_efforts(release_items, POSTPONED)
    weeks_cancelled = _sum_efforts(release_items, CANCELLED)
    weeks_not_to_do = weeks_postponed + weeks_cancelled

    release_items_count = len(planned)
    release_items_done_count = sum(1 for i in release_items if normalize_status(i.status) == DONE)

    return ProgressMetrics(
        weeks=weeks,
        weeks_done=weeks_done,
        weeks_in_progress=weeks_in_progress,
        weeks_todo=_sum_efforts(release_items, TODO),
        weeks_not_to_do=weeks_not_to_do,
        weeks_cancelled=weeks_cancelled,
        weeks_postponed=weeks_postponed,
        release_items_count=release_items_count,
        release_items_done_count=release_items_done_count,
        progress=_percentage(weeks_done, weeks),
        progress_with_in_progress=_percentage(weeks_done + weeks_in_progress, weeks),
        progress_by_release_items=_percentage(release_items_done_count, release_items_count),
        percentage_not_to_do=_percentage(weeks_not_to_do, weeks),
    )


def aggregate_progress_metrics(metrics: list[ProgressMetrics]) -> ProgressMetrics:
    """Sum progress metrics and recompute the percentages from the sums."""
    if not metrics:
        return ProgressMetrics()

    def total(attr: str) -> float:
        return sum(getattr(m, attr) or 0 for m in metrics)

    weeks = _round_half_up(total("weeks"), 1)
    weeks_done = total("weeks_done")
    weeks_in_progress = total("weeks_in_progress")
    weeks_not_to_do = total("weeks_not_to_do")
    release_items_count = int(total("release_items_count"))
    release_items_done_count = int(total("release_items_done_count"))

    return ProgressMetrics(
        weeks=weeks,
        weeks_done=weeks_done,
        weeks_in_progress=weeks_in_progress,
        weeks_todo=total("weeks_todo"),
        weeks_not_to_do=weeks_not_to_do,
        weeks_cancelled=total("weeks_cancelled"),
        weeks_postponed=total("weeks_postponed"),
        release_items_count=release_items_count,
        release_items_done_count=release_items_done_count,
        progress=_percentage(weeks_done, weeks),
        progress_with_in_progress=_percentage(weeks_done + weeks_in_progress, weeks),
        progress_by_release_items=_percentage(release_items_done_count, release_items_count),
        percentage_not_to_do=_percentage(weeks_not_to_do, weeks),
    )


def calculate_cycle_metadata(cycle: Cycle | None, now: datetime | None = None) -> CycleMetadata:
    """Month labels and day counts for a cycle, relative to ``now``."""
    if cycle is None:
        return CycleMetadata()
    start = parse_timestamp(cycle.start)
    end = parse_timestamp(cycle.end)
    if start is None or end is None:
        return CycleMetadata()

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    # absolute: a future cycle counts the days until its start
    days_from_start = math.floor(abs((now - start).total_seconds()) / 86400)
    days_in_cycle = math.floor(abs((end - start).total_seconds()) / 86400)
    current_day_percentage = (
        int(_round_half_up(days_from_start / days_in_cycle * 100)) if days_in_cycle > 0 else 0
    )

    return CycleMetadata(
        start_month=start.strftime("%b"),
        end_month=end.strftime("%b"),
        days_from_start_of_cycle=days_from_start,
        days_in_cycle=days_in_cycle,
        current_day_percentage=min(current_day_percentage, 100),
    )


def roadmap_item_with_progress(roadmap_item: RoadmapItem) -> RoadmapItem:
    return replace(
        roadmap_item,
        progress=calculate_release_item_progress(roadmap_item.release_items),
    )


def with_progress(groups: list[InitiativeGroup]) -> list[InitiativeGroup]:
    """Annotated copies of the initiative groups; the input is left untouched."""
    annotated = []
    for group in groups:
        roadmap_items = [roadmap_item_with_progress(r) for r in group.roadmap_items]
        annotated.append(
            replace(
                group,
                roadmap_items=roadmap_items,
                progress=aggregate_progress_metrics([r.progress for r in roadmap_items]),
            )
        )
    return annotated


def calculate_cycle_progress(
    cycle: Cycle, groups: list[InitiativeGroup], now: datetime | None = None
) -> CycleProgress:
    release_items = [
        item
        for group in groups
        for roadmap_item in group.roadmap_items
        for item in roadmap_item.release_items
    ]
    return CycleProgress(
        cycle=cycle,
        progress=calculate_release_item_progress(release_items),
        metadata=calculate_cycle_metadata(cycle, now),
    )


def sort_by_weeks(groups: list[InitiativeGroup]) -> list[InitiativeGroup]:
    """Order initiatives by total weeks, largest first (stable)."""

    def weeks(group: InitiativeGroup) -> float:
        if group.progress is not None:
            return group.progress.weeks
        return sum(
            _parse_effort(item)
            for roadmap_item in group.roadmap_items
            for item in roadmap_item.release_items
        )

    return sorted(groups, key=weeks, reverse=True)
