"""
project: Delve
module: __init__.py
License: MIT

Flask application setup.

Wires the Flask app and the dungeon HTTP blueprints together. Configuration
is sourced from environment variables (optionally via a ``.env`` file) with
defaults suitable for development. A local ``instance/`` directory holds the
server log.
"""

import os

from dotenv import load_dotenv
from flask import Flask, jsonify

from delve.config import load_settings

# Load .env if present so SECRET_KEY and DUNGEON_* settings can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still serve requests; only file logging is lost
    pass

app.config.update(load_settings())

from delve.routes.dungeon_api import bp_dungeon  # noqa: E402
from delve.routes.seed_api import bp_seed  # noqa: E402

app.register_blueprint(bp_dungeon)
app.register_blueprint(bp_seed)


@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "not found"}), 404


def create_app():
    """Return the Flask app instance with settings re-read from the environment."""
    app.config.update(load_settings())
    return app


__all__ = ["app", "create_app"]
