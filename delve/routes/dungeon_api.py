"""
project: Delve
module: dungeon_api.py
License: MIT

Dungeon layout API routes.

Serves generated layouts as JSON (rooms, doors, connections, wall
placements, grid rows and the reachable cell set) for external renderers,
plus a plain-text grid dump and the generation metrics of a layout.
"""

import os
import threading
from dataclasses import astuple

from flask import Blueprint, Response, current_app, jsonify, request, session

from delve.config import DEFAULTS
from delve.dungeon import DisconnectedDungeonError, Dungeon, DungeonConfig, InvalidParametersError
from delve.dungeon.rng import coerce_seed
from delve.logging_utils import get_logger
from delve.utils.tile_compress import compress_cells

_log = get_logger("api.dungeon")

# Simple in-process cache config->Dungeon. Thread-safe with a lock because the
# Flask dev server handles requests on several threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()
_DUNGEON_CACHE_MAX = 8  # small LRU-ish manual cap

_INT_PARAMS = ("width", "depth", "height", "max_room_size", "door_width")


def _cache_disabled() -> bool:
    if os.environ.get("DUNGEON_DISABLE_CACHE") == "1":
        return True
    return bool(current_app.config.get("DUNGEON_DISABLE_CACHE"))


def get_cached_dungeon(config: DungeonConfig) -> Dungeon:
    """Return a Dungeon for ``config``, reusing a cached one for a repeated config.

    The config must carry a concrete seed; generation errors propagate.
    """
    if _cache_disabled():
        return Dungeon(config)
    key = astuple(config)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            return dungeon
    dungeon = Dungeon(config)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        if len(_dungeon_cache) > _DUNGEON_CACHE_MAX:
            first_key = next(iter(_dungeon_cache.keys()))
            if first_key != key:
                _dungeon_cache.pop(first_key, None)
    return dungeon


def clear_dungeon_cache() -> None:
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


def config_from_request() -> DungeonConfig:
    """Build a DungeonConfig from app config defaults and query parameters.

    Seed precedence: ``?seed=`` then the session seed then a fresh one.
    """
    args = request.args
    overrides = {}
    for name in _INT_PARAMS:
        raw = args.get(name)
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = int(raw)
        except ValueError:
            raise InvalidParametersError(name, f"must be an integer, got {raw!r}") from None
    raw_chance = args.get("branch_chance")
    if raw_chance:
        try:
            overrides["branch_chance"] = float(raw_chance)
        except ValueError:
            raise InvalidParametersError("branch_chance", f"must be a number, got {raw_chance!r}") from None
    if args.get("policy"):
        overrides["unreached_policy"] = args.get("policy")

    raw_seed = args.get("seed")
    if raw_seed not in (None, ""):
        overrides["seed"] = coerce_seed(raw_seed)
    elif session.get("dungeon_seed") is not None:
        overrides["seed"] = session["dungeon_seed"]
    cfg = DungeonConfig.from_mapping(current_app.config, **overrides)
    if cfg.seed is None:
        cfg = cfg.replace(seed=coerce_seed(None))
    cfg.validate()
    _check_bounds(cfg)
    return cfg


def _check_bounds(cfg: DungeonConfig) -> None:
    """Reject request sizes above ``DUNGEON_MAX_BOUNDS``."""
    limit = int(current_app.config.get("DUNGEON_MAX_BOUNDS") or DEFAULTS["DUNGEON_MAX_BOUNDS"])
    for name in ("width", "depth"):
        value = getattr(cfg, name)
        if value > limit:
            raise InvalidParametersError(name, f"must be <= {limit}, got {value}")


def _dungeon_for_request():
    return get_cached_dungeon(config_from_request())


bp_dungeon = Blueprint("dungeon", __name__)


@bp_dungeon.errorhandler(InvalidParametersError)
def _invalid_params(err):
    return jsonify({"error": str(err), "field": err.field}), 400


@bp_dungeon.errorhandler(DisconnectedDungeonError)
def _disconnected(err):
    _log.warn(event="strict_disconnection", seed=err.seed, stranded=len(err.stranded))
    return jsonify({"error": str(err), "seed": err.seed, "stranded_rooms": err.stranded}), 422


@bp_dungeon.route("/api/dungeon/layout")
def dungeon_layout():
    """Return the full layout for the requested parameters.

    Response: { seed, size, rooms, doors, connections, walls, grid,
    reachable (compressed), fully_connected, stranded_rooms }
    """
    dungeon = _dungeon_for_request()
    payload = dungeon.to_dict()
    payload["reachable"] = compress_cells(dungeon.reachable)
    return jsonify(payload)


@bp_dungeon.route("/api/dungeon/grid")
def dungeon_grid():
    dungeon = _dungeon_for_request()
    return Response(dungeon.dump_grid() + "\n", mimetype="text/plain")


@bp_dungeon.route("/api/dungeon/gen/metrics", methods=["GET"])
def dungeon_generation_metrics():
    """Return generation metrics for the requested (or session) seed.

    Response: { seed: int, size: [w,d,h], metrics: {...}, flags: { enable_metrics: bool } }
    If metrics are disabled, returns an empty metrics object.
    """
    dungeon = _dungeon_for_request()
    return jsonify(
        {
            "seed": dungeon.seed,
            "size": list(dungeon.size),
            "metrics": dungeon.metrics if dungeon.enable_metrics else {},
            "flags": {"enable_metrics": dungeon.enable_metrics},
        }
    )
