from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from .game import Board, Move, Vehicle

MoveProvider = Callable[[Board], List[Move]]
ParentLink = Optional[Tuple[int, Move]]

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:

    path: Optional[List[Move]]
    nodes_expanded: int
    states_seen: int

    @property
    def solved(self) -> bool:

        return self.path is not None

    @property
    def moves(self) -> Optional[List[Move]]:

        if self.path is None:
            return None
        return compress_moves(self.path)


def solve(vehicles: Iterable[Vehicle], exit_vehicle_id: str) -> Optional[List[Move]]:
    """Shortest compressed move list that frees the exit vehicle.

    Returns an empty list when the exit vehicle already reaches the exit
    column and None when no sequence of moves does.
    """

    return search(vehicles, exit_vehicle_id).moves


def search(
    vehicles: Iterable[Vehicle],
    exit_vehicle_id: str,
    move_provider: Optional[MoveProvider] = None,
) -> SearchResult:

    return search_board(Board(vehicles, exit_vehicle_id), move_provider)


def search_board(
    start: Board, move_provider: Optional[MoveProvider] = None
) -> SearchResult:

    provider = move_provider or Board.valid_moves
    start_key = start.key()
    parents: Dict[int, ParentLink] = {start_key: None}
    frontier: Deque[Tuple[Board, int]] = deque([(start, start_key)])
    nodes_expanded = 0

    logger.debug(
        "Searching %d vehicles, exit vehicle %s", len(start.positions), start.exit_vehicle_id
    )

    while frontier:
        board, board_key = frontier.popleft()

        if board.is_goal():
            path = _reconstruct_path(parents, board_key)
            logger.info(
                "Solved in %d moves, %d nodes expanded, %d states seen",
                len(path),
                nodes_expanded,
                len(parents),
            )
            return SearchResult(path, nodes_expanded, len(parents))

        nodes_expanded += 1

        for move in provider(board):
            next_board = board.apply(move)
            next_key = next_board.key()
            if next_key in parents:
                continue
            parents[next_key] = (board_key, move)
            frontier.append((next_board, next_key))

    logger.info(
        "No solution, %d nodes expanded, %d states seen", nodes_expanded, len(parents)
    )
    return SearchResult(None, nodes_expanded, len(parents))


def _reconstruct_path(parents: Dict[int, ParentLink], key: int) -> List[Move]:

    path: List[Move] = []
    link = parents[key]
    while link is not None:
        parent_key, move = link
        path.append(move)
        link = parents[parent_key]
    path.reverse()
    return path


def compress_moves(moves: Iterable[Move]) -> List[Move]:

    compressed: List[Move] = []
    for move in moves:
        if compressed:
            last = compressed[-1]
            if last.vehicle_id == move.vehicle_id and last.direction == move.direction:
                compressed[-1] = Move(last.vehicle_id, last.direction, last.spaces + move.spaces)
                continue
        compressed.append(move)
    return compressed


def expand_moves(moves: Iterable[Move]) -> List[Move]:

    return [
        Move(move.vehicle_id, move.direction, 1)
        for move in moves
        for _ in range(move.spaces)
    ]
