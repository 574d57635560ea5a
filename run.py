"""Delve CLI entry point.

Provides subcommands for running the HTTP layout server and for generating a
single dungeon layout on the terminal. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False

EXIT_INVALID_PARAMS = 2
EXIT_DISCONNECTED = 3


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve Dungeon Generator

    Serve procedurally generated dungeon layouts over HTTP or generate a
    single layout on the terminal. Configuration can be provided via CLI
    flags or environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                      Bind address for the web server (default: 0.0.0.0)
          PORT                      Port for the web server (default: 5000)
          DUNGEON_WIDTH/DEPTH/HEIGHT Default bounds (default: 40 x 40 x 3)
          DUNGEON_MAX_ROOM_SIZE     Largest room edge before splitting (default: 12)
          DUNGEON_UNREACHED_POLICY  bridge | remove (default: bridge)
          DELVE_LOG_LEVEL           debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a 30x20 layout for a fixed seed
          python run.py generate --seed 1234 --width 30 --depth 20

          # Emit the layout as JSON
          python run.py generate --seed tavern --json

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve Dungeon Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP layout server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask server exposing /api/dungeon/* endpoints",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a dungeon and print the grid dump plus a summary (or JSON).",
    )
    gen_parser.add_argument("--seed", default=None, help="Integer or text seed (default: random)")
    gen_parser.add_argument("--width", type=int, default=None)
    gen_parser.add_argument("--depth", type=int, default=None)
    gen_parser.add_argument("--height", type=int, default=None)
    gen_parser.add_argument("--max-room-size", dest="max_room_size", type=int, default=None)
    gen_parser.add_argument("--door-width", dest="door_width", type=int, default=None)
    gen_parser.add_argument("--branch-chance", dest="branch_chance", type=float, default=None)
    gen_parser.add_argument(
        "--policy",
        dest="unreached_policy",
        choices=["bridge", "remove"],
        default=None,
        help="What to do with rooms the first traversal wave misses",
    )
    gen_parser.add_argument(
        "--strict",
        dest="strict_connectivity",
        action="store_true",
        default=None,
        help="Fail (exit 3) instead of warning when rooms stay unreachable",
    )
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print the layout as JSON")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "server"
    return args


def _run_generate(args) -> int:
    from delve.dungeon import DisconnectedDungeonError, Dungeon, DungeonConfig, InvalidParametersError
    from delve.dungeon.rng import coerce_seed

    overrides = {
        name: getattr(args, name)
        for name in (
            "width",
            "depth",
            "height",
            "max_room_size",
            "door_width",
            "branch_chance",
            "unreached_policy",
            "strict_connectivity",
        )
    }
    if args.seed is not None:
        overrides["seed"] = coerce_seed(args.seed)
    try:
        cfg = DungeonConfig.from_mapping(os.environ, **overrides)
        dungeon = Dungeon(cfg)
    except InvalidParametersError as e:
        print(f"[ERROR] invalid parameter {e}", file=sys.stderr)
        return EXIT_INVALID_PARAMS
    except DisconnectedDungeonError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_DISCONNECTED

    if args.as_json:
        print(json.dumps(dungeon.to_dict(include_metrics=dungeon.enable_metrics)))
        return 0

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    print(dungeon.dump_grid())
    print()
    print(f"{label('Seed:'):12} {value(dungeon.seed)}")
    print(f"{label('Size:'):12} {value('x'.join(str(s) for s in dungeon.size))}")
    print(f"{label('Rooms:'):12} {value(len(dungeon.rooms))}")
    print(f"{label('Doors:'):12} {value(len(dungeon.doors))}")
    print(f"{label('Walls:'):12} {value(len(dungeon.walls))}")
    print(f"{label('Connected:'):12} {value('yes' if dungeon.fully_connected else 'NO')}")
    if dungeon.stranded_rooms:
        print(f"{label('Stranded:'):12} {value(dungeon.stranded_rooms)}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _run_generate(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from delve.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Delve Layout Server{Style.RESET_ALL}" if _COLOR_ENABLED else "Delve Layout Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Version:'):12} {value(__version__)}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from delve.logging_utils import log

    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
