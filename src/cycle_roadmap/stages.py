"""Release stage resolution.

A ticket title carries its release stage in brackets, e.g.
``"Bulk export (s2)"``. Titles without a configured stage are internal.
"""

import re

from cycle_roadmap.config import Config

INTERNAL_STAGE = "internal"

_BRACKET_PAIR = re.compile(r"\(([^()]*)\)")


def _last_bracket_pair(title: str | None) -> re.Match | None:
    if not title:
        return None
    last = None
    for match in _BRACKET_PAIR.finditer(title):
        last = match
    return last


def resolve_stage(title: str | None, config: Config) -> str:
    """Return the stage from the last ``(...)`` pair of a title.

    The bracket content is lower-cased but not trimmed, so ``"( s2 )"`` is
    internal.
    """
    match = _last_bracket_pair(title)
    if match is None:
        return INTERNAL_STAGE
    stage = match.group(1).lower()
    return stage if is_external_stage(stage, config) else INTERNAL_STAGE


def strip_stage(title: str | None, config: Config) -> str:
    """Remove the resolved stage marker from a title.

    Only the matched bracket pair is removed; whitespace left around it is
    not collapsed.
    """
    if not title:
        return ""
    match = _last_bracket_pair(title)
    if match is not None and match.group(1).lower() == resolve_stage(title, config):
        title = title[: match.start()] + title[match.end():]
    return title.strip()


def is_external_stage(stage: str | None, config: Config) -> bool:
    return bool(stage) and stage in config.stages


def is_releasable_stage(stage: str | None, config: Config) -> bool:
    """True for every configured stage after the first one."""
    if not is_external_stage(stage, config):
        return False
    return config.stages.index(stage) >= 1


def is_final_release_stage(stage: str | None, config: Config) -> bool:
    return bool(config.stages) and stage == config.stages[-1]
