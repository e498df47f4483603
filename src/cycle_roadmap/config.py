"""Configuration management for Cycle Roadmap."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

import tomli_w

DEFAULT_STAGES = ["s0", "s1", "s2", "s3", "s3+"]

LABEL_TYPES = ("area", "team", "theme", "initiative")


@dataclass
class Config:
    """Configuration for the JIRA connection and the cycle data engine.

    The engine only reads from this object; it is never mutated during a run.
    """

    jira_url: str = ""
    jira_email: str = ""
    jira_api_token: str = ""
    board_id: int | None = None
    effort_field: str = "customfield_10002"
    sprint_field: str = "customfield_10020"
    stages: list[str] = field(default_factory=lambda: list(DEFAULT_STAGES))
    status_mappings: dict[str, str] = field(default_factory=dict)
    default_status: str = "todo"
    postponed_status: str = "postponed"
    label_translations: dict[str, dict[str, str]] = field(default_factory=dict)

    def translations_for(self, label_type: str) -> dict[str, str] | None:
        """Return the translation dictionary for a label type, if configured."""
        return self.label_translations.get(label_type)

    def validate(self) -> list[str]:
        """Validate configuration values. Returns list of error messages."""
        errors: list[str] = []

        if not self.jira_url:
            errors.append("JIRA URL is required")
        else:
            parsed = urlparse(self.jira_url)
            if parsed.scheme not in ("http", "https"):
                errors.append("JIRA URL must start with http:// or https://")
            if not parsed.netloc:
                errors.append("JIRA URL must include a domain")

        if not self.jira_email:
            errors.append("JIRA email is required")
        elif "@" not in self.jira_email:
            errors.append("JIRA email must be a valid email address")

        if not self.jira_api_token:
            errors.append("JIRA API token is required")

        if self.board_id is None:
            errors.append("JIRA board ID is required")

        if not self.stages:
            errors.append("At least one release stage is required")
        elif len(set(self.stages)) != len(self.stages):
            errors.append("Release stages must be unique")

        for label_type in self.label_translations:
            if label_type not in LABEL_TYPES:
                errors.append(
                    f"Unknown label type '{label_type}' "
                    f"(expected one of: {', '.join(LABEL_TYPES)})"
                )

        return errors


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return Path.home() / ".cycle-roadmap"


def get_config_path() -> Path:
    """Get the configuration file path."""
    return get_config_dir() / "config.toml"


def config_exists() -> bool:
    """Check if configuration file exists."""
    return get_config_path().exists()


def config_from_dict(data: dict) -> Config:
    """Build a Config from parsed TOML data."""
    jira_section = data.get("jira", {})
    strategy_section = data.get("release_strategy", {})
    status_section = data.get("statuses", {})
    labels_section = data.get("labels", {})

    board_id = jira_section.get("board_id")

    return Config(
        jira_url=jira_section.get("url", ""),
        jira_email=jira_section.get("email", ""),
        jira_api_token=jira_section.get("api_token", ""),
        board_id=int(board_id) if board_id is not None else None,
        effort_field=jira_section.get("effort_field", "customfield_10002"),
        sprint_field=jira_section.get("sprint_field", "customfield_10020"),
        stages=[str(s).lower() for s in strategy_section.get("stages", DEFAULT_STAGES)],
        status_mappings={
            str(k): str(v) for k, v in status_section.get("mappings", {}).items()
        },
        default_status=status_section.get("default", "todo"),
        postponed_status=status_section.get("postponed", "postponed"),
        label_translations={
            label_type: {str(k): str(v) for k, v in table.items()}
            for label_type, table in labels_section.items()
        },
    )


def load_config() -> Config:
    """Load configuration from TOML file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration not found at {config_path}. "
            "Create ~/.cycle-roadmap/config.toml to set up."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    try:
        config = config_from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    return config


def save_config(config: Config) -> None:
    """Save configuration to TOML file."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    config_path = get_config_path()

    jira_data: dict = {
        "url": config.jira_url,
        "email": config.jira_email,
        "api_token": config.jira_api_token,
        "effort_field": config.effort_field,
        "sprint_field": config.sprint_field,
    }
    if config.board_id is not None:
        jira_data["board_id"] = config.board_id

    data: dict = {
        "jira": jira_data,
        "release_strategy": {"stages": list(config.stages)},
        "statuses": {
            "default": config.default_status,
            "postponed": config.postponed_status,
            "mappings": dict(config.status_mappings),
        },
    }

    if config.label_translations:
        data["labels"] = {
            label_type: dict(table)
            for label_type, table in config.label_translations.items()
        }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
