"""
Labyrinth command line.

Usage:
    # Start the labyrinth creator (server)
    labyrinth daedalus --width 20 --height 15 --braid 0.3

    # Solve 10 labyrinths against it
    labyrinth icarus --times 10

    # Solve without a server
    labyrinth icarus --local --times 10
"""

import argparse
import logging
import random
import sys
from typing import Optional

from pydantic import ValidationError

from labyrinth.config import Settings
from labyrinth.core import MazeError, MazeGenerator

logger = logging.getLogger("labyrinth")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="labyrinth",
        description="Daedalus builds labyrinths, Icarus solves them blind.",
    )
    parser.add_argument("--port", type=int, help="Port Daedalus listens on")
    parser.add_argument("--host", type=str, help="Host Daedalus binds to")
    parser.add_argument("--width", type=int, help="Number of columns of each maze")
    parser.add_argument("--height", type=int, help="Number of rows of each maze")
    parser.add_argument("--braid", type=float, help="Probability of removing each dead end")
    parser.add_argument("--seed", type=int, help="Seed for reproducible mazes and walks")
    parser.add_argument("--debug", action="store_true", default=None,
                        help="Print the maze after every move")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser(
        "daedalus",
        aliases=["deadalus", "server"],
        help="Start the labyrinth creator",
    )
    icarus = commands.add_parser(
        "icarus",
        aliases=["client"],
        help="Start the labyrinth solver",
    )
    icarus.add_argument("--times", type=int, help="Number of labyrinths to solve")
    icarus.add_argument("--local", action="store_true",
                        help="Generate mazes in-process instead of calling Daedalus")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command line flags on top."""
    overrides = {}
    for key in ("port", "host", "width", "height", "braid", "seed", "debug", "times"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    return Settings(**overrides)


def run_daedalus(settings: Settings) -> None:
    import uvicorn

    from labyrinth.main import create_app

    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


def run_icarus_command(settings: Settings, local: bool) -> None:
    from labyrinth.solver import LocalMazeClient, MazeClient, run_icarus

    rng = random.Random(settings.seed) if settings.seed is not None else None
    if local:
        client = LocalMazeClient(
            width=settings.width,
            height=settings.height,
            braid=settings.braid,
            generator=MazeGenerator(seed=settings.seed),
        )
    else:
        client = MazeClient(settings.server_url, timeout=settings.request_timeout)

    run_icarus(client, settings.times, rng=rng)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(args)
    except ValidationError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        if args.command in ("daedalus", "deadalus", "server"):
            run_daedalus(settings)
        else:
            run_icarus_command(settings, args.local)
    except MazeError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
