"""Seed management API routes.

Stores the active dungeon seed in the session; later layout requests
without an explicit ``seed`` use it.
"""
from flask import Blueprint, jsonify, request, session

from delve.dungeon.rng import coerce_seed
from delve.logging_utils import get_logger

bp_seed = Blueprint('seed_api', __name__)

_log = get_logger("api.seed")


@bp_seed.route('/api/dungeon/seed', methods=['POST'])
def set_seed():
    """Set (or generate) the dungeon seed.

    Body JSON (all optional):
      { "seed": <int|str|null>, "regenerate": <bool> }
    - If seed omitted or null => random seed.
    - If seed provided (int or string) => deterministic hashing.

    Response: { "seed": <int> }
    """
    data = request.get_json(silent=True) or {}
    regenerate = data.get('regenerate')
    provided = data.get('seed', None)
    if regenerate and provided is None:
        seed = coerce_seed(None)
    else:
        try:
            seed = coerce_seed(provided)
        except TypeError:
            return jsonify({"error": "seed must be an integer, string or null"}), 400
    session['dungeon_seed'] = seed
    _log.info(event="seed_set", seed=seed, regenerate=bool(regenerate))
    return jsonify({"seed": seed})
