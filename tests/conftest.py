"""Shared fixtures for Cycle Roadmap tests."""

import pytest

from cycle_roadmap.config import Config
from cycle_roadmap.models import Cycle

STAGES = ["s0", "s1", "s2", "s3", "s3+"]


@pytest.fixture
def config():
    """Engine configuration with small translation dictionaries."""
    return Config(
        jira_url="https://jira.example.com",
        jira_email="test@example.com",
        jira_api_token="test-token-123",
        board_id=1,
        effort_field="effort",
        stages=list(STAGES),
        status_mappings={
            "1": "todo",
            "3": "inprogress",
            "10001": "done",
            "6": "cancelled",
        },
        label_translations={
            "area": {"frontend": "Frontend", "backend": "Backend"},
            "team": {"team-a": "Team A", "team-b": "Team B"},
            "theme": {"platform": "Platform", "virtual": "Non-Roadmap Projects"},
            "initiative": {"init-1": "Initiative One", "init-2": "Initiative Two"},
        },
    )


@pytest.fixture
def sample_sprint():
    """Sample sprint data."""
    return {
        "id": 100,
        "name": "Cycle 1",
        "state": "active",
        "startDate": "2024-01-01T00:00:00.000Z",
        "endDate": "2024-03-31T00:00:00.000Z",
    }


@pytest.fixture
def cycle(sample_sprint):
    return Cycle.from_sprint(sample_sprint)


@pytest.fixture
def roadmap_items():
    """Raw roadmap item records keyed by issue key."""
    return {
        "ROADMAP-456": {
            "summary": "Roadmap Item One",
            "labels": ["initiative:init-1", "theme:platform", "area:frontend"],
        },
        "ROADMAP-789": {
            "summary": "Roadmap Item Two",
            "labels": ["initiative:init-2", "area:backend"],
        },
        "ROADMAP-VIRTUAL": {
            "summary": "Keep the lights on",
            "labels": ["theme:virtual", "initiative:init-1"],
        },
    }


@pytest.fixture
def make_issue():
    """Factory for raw release item issues."""

    def _make_issue(
        key="RELEASE-001",
        summary="Bulk export (s1)",
        parent="ROADMAP-456",
        labels=None,
        effort=1,
        status_id="3",
        assignee=None,
        **extra_fields,
    ):
        fields = {
            "summary": summary,
            "status": {"id": status_id, "name": "In Progress"},
            "labels": ["area:frontend", "team:team-a"] if labels is None else labels,
            "assignee": {"accountId": "user-1", "displayName": "Alice"} if assignee is None else assignee,
            "reporter": None,
            "closedSprints": [],
        }
        if parent is not None:
            fields["parent"] = {"key": parent}
        if effort is not None:
            fields["effort"] = effort
        fields.update(extra_fields)
        return {"key": key, "fields": fields}

    return _make_issue
