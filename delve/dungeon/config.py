from dataclasses import dataclass, fields, replace as _replace
from typing import Any, Mapping, Optional

from .errors import InvalidParametersError

POLICY_BRIDGE = "bridge"
POLICY_REMOVE = "remove"
UNREACHED_POLICIES = (POLICY_BRIDGE, POLICY_REMOVE)

_TRUTHY = {"1", "true", "yes", "on"}

# Setting names that differ from the plain DUNGEON_<FIELD> form
_KEY_ALIASES = {"enable_metrics": "DUNGEON_ENABLE_GENERATION_METRICS"}


@dataclass
class DungeonConfig:
    width: int = 40
    depth: int = 40
    height: int = 3
    seed: Optional[int] = None
    max_room_size: int = 12
    door_width: int = 2
    branch_chance: float = 0.25
    unreached_policy: str = POLICY_BRIDGE
    strict_connectivity: bool = False
    enable_metrics: bool = True
    wall_table: Optional[str] = None

    @property
    def size(self):
        return (self.width, self.depth, self.height)

    def validate(self) -> "DungeonConfig":
        """Reject malformed parameters before any stage runs."""
        for name in ("width", "depth", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidParametersError(name, f"must be a positive integer, got {value!r}")
        for name in ("max_room_size", "door_width"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidParametersError(name, f"must be an integer >= 1, got {value!r}")
        chance = self.branch_chance
        if isinstance(chance, bool) or not isinstance(chance, (int, float)) or not 0.0 <= chance <= 1.0:
            raise InvalidParametersError("branch_chance", f"must be a number within [0, 1], got {chance!r}")
        if self.unreached_policy not in UNREACHED_POLICIES:
            raise InvalidParametersError(
                "unreached_policy", f"must be one of {UNREACHED_POLICIES}, got {self.unreached_policy!r}"
            )
        return self

    def replace(self, **overrides) -> "DungeonConfig":
        known = {f.name for f in fields(self)}
        for key in overrides:
            if key not in known:
                raise InvalidParametersError(key, "unknown parameter")
        return _replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], **overrides) -> "DungeonConfig":
        """Build a config from ``DUNGEON_*`` keys (Flask app.config or os.environ).

        Explicit keyword overrides win over mapping values; ``None`` overrides are ignored.
        """
        values = {}
        for f in fields(cls):
            key = _KEY_ALIASES.get(f.name, "DUNGEON_" + f.name.upper())
            if key not in mapping or mapping[key] in (None, ""):
                continue
            values[f.name] = _coerce(f.name, mapping[key])
        cfg = cls(**values)
        return cfg.replace(**overrides)


def _coerce(name: str, raw: Any) -> Any:
    if name in ("strict_connectivity", "enable_metrics"):
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in _TRUTHY
    try:
        if name in ("width", "depth", "height", "max_room_size", "door_width", "seed"):
            return int(raw)
        if name == "branch_chance":
            return float(raw)
    except (TypeError, ValueError):
        raise InvalidParametersError(name, f"cannot parse {raw!r}") from None
    return raw


__all__ = ["DungeonConfig", "POLICY_BRIDGE", "POLICY_REMOVE", "UNREACHED_POLICIES"]
