from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from .exceptions import GridlockError
from .levels import Level, load_level, validate_layout
from .search import search

EXIT_SOLVED = 0
EXIT_UNSOLVABLE = 1
EXIT_INVALID = 2

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:

    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("LOGLEVEL", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:

    parser = argparse.ArgumentParser(
        prog="gridlock-solve",
        description="Solve 6x6 sliding-block puzzles and print the shortest move list",
    )
    parser.add_argument("levels", type=Path, nargs="+", help="Level JSON files")
    parser.add_argument("--exit", dest="exit_id", help="Override the exit vehicle id")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def solve_level(level: Level, exit_id: Optional[str] = None) -> int:

    exit_vehicle_id = exit_id or level.exit_vehicle_id
    is_valid, error = validate_layout(level.vehicles, exit_vehicle_id)
    if not is_valid:
        print(f"{level.name:25s} INVALID: {error}")
        return EXIT_INVALID

    start = time.perf_counter()
    result = search(level.vehicles, exit_vehicle_id)
    elapsed = time.perf_counter() - start

    moves = result.moves
    if moves is None:
        print(f"{level.name:25s} UNSOLVABLE ({result.nodes_expanded} nodes, {elapsed:.3f}s)")
        return EXIT_UNSOLVABLE

    print(
        f"{level.name:25s} OK: {len(moves):3d} moves, "
        f"{result.nodes_expanded:6d} nodes, {elapsed:6.3f}s"
    )
    for index, move in enumerate(moves, start=1):
        print(f"  {index}. {move}")
    return EXIT_SOLVED


def main(argv: Optional[Sequence[str]] = None) -> int:

    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    statuses: List[int] = []
    for level_path in args.levels:
        try:
            level = load_level(level_path)
        except (OSError, GridlockError) as exc:
            logger.debug("Failed to load %s", level_path, exc_info=True)
            print(f"{level_path.name:25s} ERROR: {exc}")
            statuses.append(EXIT_INVALID)
            continue
        statuses.append(solve_level(level, args.exit_id))

    return max(statuses, default=EXIT_SOLVED)


if __name__ == "__main__":
    sys.exit(main())
