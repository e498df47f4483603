"""Label extraction and translation.

Labels on JIRA issues follow a ``prefix:value`` convention, e.g.
``team:platform.core`` or ``area:platform``. Values are translated to display
names through the per-type dictionaries in the configuration.
"""

from urllib.parse import urlparse

from cycle_roadmap.config import Config
from cycle_roadmap.models import Raw, Resolved, Translated, Unknown

PLACEHOLDER_HOST = "https://example.com"


def extract_labels_with_prefix(labels: list[str] | None, prefix: str) -> list[str]:
    """Return the values of all labels of the form ``{prefix}:{value}``.

    Labels are trimmed before matching; the value itself is kept as-is.
    An empty prefix matches nothing.
    """
    if not prefix or not labels:
        return []
    prefix_with_colon = f"{prefix}:"
    return [
        label.strip()[len(prefix_with_colon):]
        for label in labels
        if isinstance(label, str) and label.strip().startswith(prefix_with_colon)
    ]


def lookup_label(label_type: str, value: str, config: Config) -> Translated | None:
    """Strict dictionary lookup. Returns None when there is no entry."""
    translations = config.translations_for(label_type)
    if not translations or not value:
        return None
    name = translations.get(value)
    if name is None:
        return None
    return Translated(name)


def translate_label(label_type: str, value: str, config: Config) -> str:
    """Translate a label value, falling back to the raw value."""
    if not value:
        return ""
    found = lookup_label(label_type, value, config)
    return found.name if found else value


def translate_label_without_fallback(
    label_type: str, value: str, config: Config
) -> str | None:
    """Translate a label value; None when no translation exists."""
    found = lookup_label(label_type, value, config)
    return found.name if found else None


def resolve_label(label_type: str, value: str | None, config: Config) -> Resolved:
    """Resolve a label value to Translated, Raw or Unknown (value is None)."""
    if value is None:
        return Unknown()
    return lookup_label(label_type, value, config) or Raw(value)


def jira_base_url(config: Config) -> str:
    """Return the browsable JIRA host, or the placeholder host."""
    host = (config.jira_url or "").strip()
    parsed = urlparse(host)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return PLACEHOLDER_HOST
    host = host.rstrip("/")
    if host.endswith("/rest"):
        host = host[: -len("/rest")]
    return host


def jira_link(key: str, config: Config) -> str:
    """Browse URL for an issue key."""
    return f"{jira_base_url(config)}/browse/{key}"
