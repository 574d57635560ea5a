import pytest

from delve.config import DEFAULTS, load_settings
from delve.dungeon import Dungeon
from delve.dungeon.config import POLICY_BRIDGE, DungeonConfig
from delve.dungeon.errors import InvalidParametersError


def test_defaults():
    cfg = DungeonConfig()
    assert cfg.size == (40, 40, 3)
    assert cfg.max_room_size == 12
    assert cfg.door_width == 2
    assert cfg.branch_chance == 0.25
    assert cfg.unreached_policy == POLICY_BRIDGE
    assert cfg.strict_connectivity is False
    assert cfg.enable_metrics is True
    assert cfg.validate() is cfg


def test_replace_ignores_none():
    cfg = DungeonConfig().replace(width=10, depth=None)
    assert cfg.width == 10
    assert cfg.depth == 40


def test_from_mapping_coerces_strings():
    mapping = {
        "DUNGEON_WIDTH": "30",
        "DUNGEON_BRANCH_CHANCE": "0.5",
        "DUNGEON_STRICT_CONNECTIVITY": "true",
        "DUNGEON_ENABLE_GENERATION_METRICS": "0",
        "DUNGEON_UNREACHED_POLICY": "remove",
        "DUNGEON_WALL_TABLE": "",
        "UNRELATED": "x",
    }
    cfg = DungeonConfig.from_mapping(mapping)
    assert cfg.width == 30
    assert cfg.branch_chance == 0.5
    assert cfg.strict_connectivity is True
    assert cfg.enable_metrics is False
    assert cfg.unreached_policy == "remove"
    assert cfg.wall_table is None


def test_from_mapping_overrides_win():
    cfg = DungeonConfig.from_mapping({"DUNGEON_WIDTH": 30, "DUNGEON_DEPTH": 31}, width=12, depth=None)
    assert cfg.width == 12
    assert cfg.depth == 31


def test_from_mapping_rejects_unparseable_numbers():
    with pytest.raises(InvalidParametersError) as exc:
        DungeonConfig.from_mapping({"DUNGEON_DOOR_WIDTH": "wide"})
    assert exc.value.field == "door_width"


def test_invalid_parameters_error_is_value_error():
    with pytest.raises(ValueError):
        DungeonConfig(width=0).validate()


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("DUNGEON_WIDTH", "25")
    monkeypatch.setenv("DUNGEON_DISABLE_CACHE", "yes")
    monkeypatch.delenv("DUNGEON_STRICT_CONNECTIVITY", raising=False)
    settings = load_settings()
    assert settings["DUNGEON_WIDTH"] == "25"
    assert settings["DUNGEON_DISABLE_CACHE"] is True
    assert settings["DUNGEON_STRICT_CONNECTIVITY"] is False
    assert set(settings) == set(DEFAULTS)
    assert DungeonConfig.from_mapping(settings).width == 25


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"max_room_size": "12"}, "max_room_size"),
        ({"max_room_size": True}, "max_room_size"),
        ({"door_width": 2.5}, "door_width"),
        ({"door_width": 0}, "door_width"),
        ({"branch_chance": "0.5"}, "branch_chance"),
        ({"branch_chance": False}, "branch_chance"),
        ({"branch_chance": 1.5}, "branch_chance"),
    ],
)
def test_validate_rejects_wrong_types_and_ranges(overrides, field):
    with pytest.raises(InvalidParametersError) as exc:
        DungeonConfig().replace(**overrides).validate()
    assert exc.value.field == field


def test_integral_branch_chance_is_accepted():
    assert DungeonConfig(branch_chance=1).validate().branch_chance == 1


def test_replace_rejects_unknown_keys():
    with pytest.raises(InvalidParametersError) as exc:
        DungeonConfig().replace(room_count=5)
    assert exc.value.field == "room_count"


def test_dungeon_rejects_bad_parameters_before_partitioning():
    calls = []
    with pytest.raises(InvalidParametersError) as exc:
        Dungeon(seed=1, door_width=2.5, progress=lambda stage, step: calls.append(stage))
    assert exc.value.field == "door_width"
    assert calls == []
    with pytest.raises(InvalidParametersError):
        Dungeon(seed=1, corridor_width=3)


def test_max_bounds_setting(monkeypatch):
    assert DEFAULTS["DUNGEON_MAX_BOUNDS"] == 128
    monkeypatch.setenv("DUNGEON_MAX_BOUNDS", "64")
    assert load_settings()["DUNGEON_MAX_BOUNDS"] == "64"
