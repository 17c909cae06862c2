"""Flask app factory exposing the simulation to a renderer."""

from __future__ import annotations

from typing import Any, Dict

from flask import Flask

from app.routes import bp
from app.routes.api import init_state


def create_app(config: Dict[str, Any] | None = None) -> Flask:
    """Create the Flask application and initialize engine state."""
    init_state(config)
    flask_app = Flask(__name__)
    flask_app.register_blueprint(bp)
    return flask_app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000)
