"""Flask application factory for the Cycle Roadmap JSON API."""

from flask import Flask


def create_app() -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    app.config["SECRET_KEY"] = "cycle-roadmap-local-dev"

    from cycle_roadmap.web.routes import bp
    app.register_blueprint(bp)

    return app
