"""HTTP route handlers for the Cycle Roadmap JSON API."""

from flask import Blueprint, jsonify, request

from cycle_roadmap.config import config_exists, load_config
from cycle_roadmap.cycle_data import (
    cycle_data_to_dict,
    fetch_cycle_data,
    fetch_overview,
    overview_to_dict,
)
from cycle_roadmap.exceptions import (
    ConfigNotFoundError,
    CycleNotFoundError,
    CycleRoadmapError,
    InvalidConfigError,
    InvalidJqlError,
    JiraAuthError,
    JiraConnectionError,
    JiraRateLimitError,
)
from cycle_roadmap.jira_client import AuthenticationError, JiraClient, RateLimitError
from cycle_roadmap.jira_client import ConnectionError as JiraClientConnectionError
from cycle_roadmap.models import Cycle

bp = Blueprint("main", __name__)

_ERROR_STATUS = [
    (ConfigNotFoundError, 503),
    (InvalidConfigError, 503),
    (JiraAuthError, 401),
    (JiraRateLimitError, 429),
    (JiraConnectionError, 503),
    (InvalidJqlError, 400),
    (CycleNotFoundError, 404),
]


def _error_response(error: CycleRoadmapError):
    for error_type, status in _ERROR_STATUS:
        if isinstance(error, error_type):
            return jsonify({"error": str(error)}), status
    return jsonify({"error": str(error)}), 500


@bp.route("/health")
def health():
    """Health check endpoint."""
    config_loaded = config_exists()
    if config_loaded:
        return jsonify({"status": "ok", "config_loaded": True})
    else:
        return jsonify({
            "status": "error",
            "config_loaded": False,
            "message": "Configuration not found",
        }), 503


@bp.route("/api/cycle-data")
def api_cycle_data():
    """Return the initiative tree of one cycle as JSON."""
    cycle_id = request.args.get("cycle_id", "").strip() or None

    try:
        result = fetch_cycle_data(cycle_id)
    except CycleRoadmapError as e:
        return _error_response(e)

    return jsonify(cycle_data_to_dict(result))


@bp.route("/api/overview")
def api_overview():
    """Return the release overview of all cycles as JSON."""
    try:
        result = fetch_overview()
    except CycleRoadmapError as e:
        return _error_response(e)

    return jsonify(overview_to_dict(result))


@bp.route("/api/cycles")
def api_cycles():
    """Return the sprints of the configured board as cycles."""
    if not config_exists():
        return jsonify({"error": "Configuration not found"}), 503

    try:
        config = load_config()
    except (FileNotFoundError, ValueError) as e:
        return jsonify({"error": str(e)}), 503

    try:
        client = JiraClient(config)
        sprints = client.get_sprints(config.board_id)
    except AuthenticationError as e:
        return jsonify({"error": str(e)}), 401
    except RateLimitError as e:
        return jsonify({"error": str(e)}), 429
    except JiraClientConnectionError as e:
        return jsonify({"error": str(e)}), 503

    return jsonify([Cycle.from_sprint(s).to_dict() for s in sprints])
