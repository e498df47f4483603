"""Tests for release stage resolution."""

import pytest

from cycle_roadmap.config import Config
from cycle_roadmap.stages import (
    is_external_stage,
    is_final_release_stage,
    is_releasable_stage,
    resolve_stage,
    strip_stage,
)


class TestResolveStage:
    """Tests for resolve_stage."""

    def test_resolves_stage(self, config):
        assert resolve_stage("Foo (s2)", config) == "s2"

    def test_is_case_insensitive(self, config):
        assert resolve_stage("Foo (S2)", config) == "s2"

    def test_whitespace_inside_brackets_is_internal(self, config):
        assert resolve_stage("Foo ( s2 )", config) == "internal"

    def test_last_bracket_pair_wins(self, config):
        assert resolve_stage("Foo (s1) bar (s3)", config) == "s3"
        assert resolve_stage("Foo (s3) bar (beta)", config) == "internal"

    def test_incomplete_trailing_pair_is_ignored(self, config):
        assert resolve_stage("Foo (s2) bar (s3", config) == "s2"

    def test_plus_stage(self, config):
        assert resolve_stage("Enhancement (s3+)", config) == "s3+"

    @pytest.mark.parametrize("title", ["", None, "No stage here", "Foo ()", "Foo (s9)"])
    def test_falls_back_to_internal(self, config, title):
        assert resolve_stage(title, config) == "internal"


class TestStripStage:
    """Tests for strip_stage."""

    def test_strips_stage_marker(self, config):
        assert strip_stage("Bulk export (s2)", config) == "Bulk export"

    def test_keeps_inner_whitespace(self, config):
        assert strip_stage("Bulk (S1) export", config) == "Bulk  export"

    def test_keeps_unrecognized_brackets(self, config):
        assert strip_stage("Bulk export (beta)", config) == "Bulk export (beta)"

    def test_strips_only_last_pair(self, config):
        assert strip_stage("(s1) Bulk export (s2)", config) == "(s1) Bulk export"

    def test_strips_internal_marker(self, config):
        assert strip_stage("Refactoring (internal)", config) == "Refactoring"


class TestStageCategories:
    """Tests for the stage classification helpers."""

    def test_first_stage_is_not_releasable(self, config):
        assert not is_releasable_stage("s0", config)

    @pytest.mark.parametrize("stage", ["s1", "s2", "s3", "s3+"])
    def test_later_stages_are_releasable(self, config, stage):
        assert is_releasable_stage(stage, config)

    def test_two_stage_configuration(self):
        config = Config(stages=["alpha", "ga"])
        assert not is_releasable_stage("alpha", config)
        assert is_releasable_stage("ga", config)

    @pytest.mark.parametrize("stage", ["internal", "", None, "s9"])
    def test_unknown_stage_is_never_releasable(self, config, stage):
        assert not is_releasable_stage(stage, config)
        assert not is_external_stage(stage, config)

    def test_final_release_stage(self, config):
        assert is_final_release_stage("s3+", config)
        assert not is_final_release_stage("s3", config)

    def test_external_stage(self, config):
        assert is_external_stage("s0", config)
        assert not is_external_stage("internal", config)
