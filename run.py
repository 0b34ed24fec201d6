"""Delve CLI entry point.

Provides subcommands for generating a dungeon straight to the terminal and for
running the JSON API server. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from pathlib import Path
from textwrap import dedent

from colorama import Fore, Style
from colorama import just_fix_windows_console
from dotenv import load_dotenv

just_fix_windows_console()  # pragma: no cover

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

VERSION_FILE = Path(__file__).resolve().parent / "VERSION"


def _load_version() -> str:
    try:
        return VERSION_FILE.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.0.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    from delve.dungeon.tiles import CORRIDOR_LAYOUTS, DUNGEON_LAYOUTS, ROOM_LAYOUTS

    description = """
    Delve dungeon generator

    Generate a seeded dungeon map in the terminal or run the JSON API server.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                              Bind address for the web server (default: 0.0.0.0)
          PORT                              Port for the web server (default: 5000)
          DELVE_ENABLE_GENERATION_METRICS   Record per-phase timings (default: 1)
          DELVE_CACHE_SIZE                  Seeded dungeons kept by the API (default: 8)
          DELVE_LOG_LEVEL                   debug | info | warn | error (default: info)
          DELVE_LOG_JSON                    Emit event logs as JSON lines (default: 0)

        Examples:
          # Print a map for a fixed seed
          python run.py generate --seed 42

          # Small straight-corridor map as JSON
          python run.py generate --seed 42 --rows 21 --cols 21 --corridor-layout Straight --json

          # Three stacked floors sharing one stairwell
          python run.py generate --seed 7 --floors 3 --stairs 1

          # Run the API server on a custom port
          python run.py server --port 8080

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="delve",
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
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the dungeon API web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask dungeon API server",
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
        help="Generate a dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a dungeon and print an ASCII map (or JSON with --json)",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="PRNG seed (default: current time)")
    gen_parser.add_argument("--rows", dest="n_rows", type=int, default=None, help="Grid rows, forced odd (default: 39)")
    gen_parser.add_argument("--cols", dest="n_cols", type=int, default=None, help="Grid columns, forced odd (default: 39)")
    gen_parser.add_argument(
        "--layout", dest="dungeon_layout", choices=DUNGEON_LAYOUTS, default=None, help="Overall dungeon shape"
    )
    gen_parser.add_argument("--room-layout", dest="room_layout", choices=ROOM_LAYOUTS, default=None)
    gen_parser.add_argument("--corridor-layout", dest="corridor_layout", choices=tuple(CORRIDOR_LAYOUTS), default=None)
    gen_parser.add_argument("--room-min", dest="room_min", type=int, default=None, help="Smallest room span in cells")
    gen_parser.add_argument("--room-max", dest="room_max", type=int, default=None, help="Largest room span in cells")
    gen_parser.add_argument(
        "--deadends", dest="remove_deadends", type=int, default=None, help="Percent of dead ends removed (0-100)"
    )
    gen_parser.add_argument("--stairs", dest="add_stairs", type=int, default=None, help="Stairs per floor")
    gen_parser.add_argument("--floors", type=int, default=None, help="Number of stacked floors")
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print JSON instead of a map")
    gen_parser.set_defaults(command="generate")

    # If no command provided, default to server
    if not argv:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


OPTION_ARGS = (
    "seed",
    "n_rows",
    "n_cols",
    "dungeon_layout",
    "room_layout",
    "corridor_layout",
    "room_min",
    "room_max",
    "remove_deadends",
    "add_stairs",
    "floors",
)


def run_generate(args: argparse.Namespace) -> int:
    from delve.dungeon import DungeonOptions, OptionsError, create_dungeon

    raw = {name: getattr(args, name, None) for name in OPTION_ARGS}
    try:
        options = DungeonOptions.from_mapping(raw)
    except OptionsError as exc:
        print(f"delve generate: error: {exc}", file=sys.stderr)
        return 2
    dungeon = create_dungeon(options)
    if args.as_json:
        print(json.dumps(dungeon.to_dict()))
        return 0
    header = f"seed {dungeon.seed}"
    if _COLOR_ENABLED:
        header = f"{Fore.CYAN}{Style.BRIGHT}{header}{Style.RESET_ALL}"
    print(header)
    print(dungeon.to_ascii())
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # Load .env if requested, otherwise the default .env if present
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return run_generate(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from delve import server
    from delve.logging_utils import log

    title = f"{Fore.CYAN}{Style.BRIGHT}Delve Dungeon API{Style.RESET_ALL}" if _COLOR_ENABLED else "Delve Dungeon API"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
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

    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="listen", host=host, port=port, debug=debug)
    server.start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
