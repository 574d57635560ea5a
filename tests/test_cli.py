import importlib
import json
import sys

import pytest

# Import run.py as a module and exercise parse_args + main with a patched
# start_server so no networking is started.


@pytest.fixture()
def run_module(monkeypatch):
    # Ensure a clean import each time (run.py reads VERSION once)
    if 'run' in sys.modules:
        del sys.modules['run']
    mod = importlib.import_module('run')
    return mod


def test_version_flag_outputs_version(run_module, capsys):
    ver = run_module.__version__
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(['--version'])
    assert exc.value.code == 0
    captured = capsys.readouterr().out
    assert ver in captured
    assert 'Delve Dungeon Generator' in captured


def test_default_command_is_server(run_module):
    ns = run_module.parse_args([])
    assert ns.command == 'server'


def test_env_file_alone_defaults_to_server(run_module):
    ns = run_module.parse_args(['--env-file', 'missing.env'])
    assert ns.command == 'server'
    assert ns.env_file == 'missing.env'


def test_server_main_invokes_start_server(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls['host'] = host
        calls['port'] = port
        calls['debug'] = debug

    monkeypatch.setenv('PORT', '5555')
    monkeypatch.setenv('HOST', '127.0.0.1')
    monkeypatch.delenv('FLASK_DEBUG', raising=False)
    import delve.server as server_mod
    monkeypatch.setattr(server_mod, 'start_server', fake_start_server)

    assert run_module.main(['server']) == 0
    assert calls == {'host': '127.0.0.1', 'port': 5555, 'debug': False}


def test_server_flags_override_env(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv('PORT', '5555')
    import delve.server as server_mod
    monkeypatch.setattr(server_mod, 'start_server', fake_start_server)
    run_module.main(['server', '--host', '0.0.0.0', '--port', '8080', '--debug'])
    assert calls == {'host': '0.0.0.0', 'port': 8080, 'debug': True}


def test_generate_prints_grid_and_summary(run_module, capsys):
    assert run_module.main(['generate', '--seed', '1234', '--width', '20', '--depth', '20']) == 0
    out = capsys.readouterr().out
    assert '#' in out
    assert 'Seed:' in out and '1234' in out
    assert 'Rooms:' in out


def test_generate_json(run_module, capsys):
    assert run_module.main(['generate', '--seed', 'tavern', '--width', '24', '--depth', '18', '--json']) == 0
    last = capsys.readouterr().out.strip().splitlines()[-1]
    data = json.loads(last)
    from delve.dungeon.rng import coerce_seed

    assert data['seed'] == coerce_seed('tavern')
    assert data['size'][:2] == [24, 18]
    assert 'metrics' in data


def test_generate_invalid_parameters_exit_2(run_module, capsys):
    assert run_module.main(['generate', '--width', '0']) == 2
    assert 'width' in capsys.readouterr().err


def test_generate_strict_disconnection_exit_3(run_module, monkeypatch, capsys):
    import delve.dungeon as dungeon_pkg
    from delve.dungeon import DisconnectedDungeonError

    def fake_dungeon(config):
        raise DisconnectedDungeonError([2], seed=config.seed)

    monkeypatch.setattr(dungeon_pkg, 'Dungeon', fake_dungeon)
    assert run_module.main(['generate', '--seed', '5', '--strict']) == 3
    assert 'unreachable' in capsys.readouterr().err


def test_generate_rejects_unknown_policy(run_module):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(['generate', '--policy', 'teleport'])
    assert exc.value.code == 2
