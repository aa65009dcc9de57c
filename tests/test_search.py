from __future__ import annotations

from typing import Optional

import pytest

from gridlock.exceptions import VehicleNotFound
from gridlock.game import HORIZONTAL, VERTICAL, Board, Move, Vehicle
from gridlock.search import compress_moves, expand_moves, search, solve


def _brute_force_shortest(board: Board, limit: int) -> Optional[int]:
    # Iterative deepening over every move sequence, no deduplication.
    def reachable(current: Board, depth: int) -> bool:
        if current.is_goal():
            return True
        if depth == 0:
            return False
        return any(reachable(current.apply(move), depth - 1) for move in current.valid_moves())

    for depth in range(limit + 1):
        if reachable(board, depth):
            return depth
    return None


def _replay(vehicles, exit_id, path):
    board = Board(vehicles, exit_id)
    for move in expand_moves(path):
        assert move in board.valid_moves()
        board = board.apply(move)
        assert board.is_valid()
    return board


def test_open_road_is_a_single_compressed_move(open_road):
    assert solve(open_road, "R") == [Move("R", "right", 4)]


def test_blocked_exit_row_has_no_solution():
    vehicles = [
        Vehicle("R", HORIZONTAL, 2, 2, 0),
        Vehicle("B", HORIZONTAL, 2, 2, 4),
    ]

    result = search(vehicles, "R")

    assert result.path is None
    assert not result.solved
    assert result.moves is None
    assert solve(vehicles, "R") is None
    assert result.nodes_expanded == result.states_seen


def test_exit_vehicle_already_at_exit():
    vehicles = [
        Vehicle("R", HORIZONTAL, 2, 2, 4),
        Vehicle("A", VERTICAL, 3, 0, 0),
    ]

    assert solve(vehicles, "R") == []
    assert search(vehicles, "R").nodes_expanded == 0


def test_missing_exit_vehicle_is_a_caller_error(open_road):
    with pytest.raises(VehicleNotFound):
        solve(open_road, "X")
    with pytest.raises(ValueError):
        solve(open_road, "X")


def test_integer_exit_id_is_found():
    vehicles = [Vehicle(1, HORIZONTAL, 2, 2, 0), Vehicle(2, HORIZONTAL, 3, 0, 0)]

    assert solve(vehicles, 1) == [Move("1", "right", 4)]


def test_ties_follow_vehicle_then_direction_order(single_blocker):
    expected = [Move("A", "up", 2), Move("R", "right", 4)]

    assert solve(single_blocker, "R") == expected
    assert solve(list(reversed(single_blocker)), "R") == expected


def test_boxed_in_solution_is_valid_and_shortest(boxed_in):
    result = search(boxed_in, "R")

    assert result.solved
    assert len(result.path) == 3
    assert _replay(boxed_in, "R", result.path).is_goal()
    assert result.moves == [
        Move("B", "left", 1),
        Move("A", "up", 2),
        Move("R", "right", 4),
    ]


@pytest.mark.parametrize("fixture_name", ["open_road", "single_blocker", "boxed_in"])
def test_path_length_matches_brute_force(request, fixture_name):
    vehicles = request.getfixturevalue(fixture_name)

    result = search(vehicles, "R")

    assert len(result.path) == _brute_force_shortest(Board(vehicles, "R"), 4)


def test_every_reachable_configuration_is_legal(boxed_in):
    start = Board(boxed_in, "R")
    seen = {start.key()}
    frontier = [start]
    while frontier:
        board = frontier.pop()
        assert board.is_valid()
        for move in board.valid_moves():
            next_board = board.apply(move)
            if next_board.key() not in seen:
                seen.add(next_board.key())
                frontier.append(next_board)

    assert search(boxed_in, "R").states_seen <= len(seen)


def test_larger_layout_replays_to_goal():
    vehicles = [
        Vehicle("R", HORIZONTAL, 2, 2, 1),
        Vehicle("A", VERTICAL, 3, 0, 3),
        Vehicle("B", HORIZONTAL, 2, 3, 2),
        Vehicle("C", VERTICAL, 2, 3, 0),
        Vehicle("D", HORIZONTAL, 3, 5, 3),
        Vehicle("E", VERTICAL, 2, 1, 5),
    ]

    result = search(vehicles, "R")

    assert result.solved
    assert len(result.path) == 5
    assert _replay(vehicles, "R", result.path).is_goal()


def test_custom_move_provider_restricts_search(single_blocker):
    def only_exit_vehicle(board):
        return [move for move in board.valid_moves() if move.vehicle_id == "R"]

    result = search(single_blocker, "R", move_provider=only_exit_vehicle)

    assert not result.solved


def test_compress_merges_runs_and_sums_spaces():
    moves = [
        Move("A", "up", 1),
        Move("A", "up", 2),
        Move("A", "down", 1),
        Move("R", "right", 2),
        Move("R", "right", 3),
        Move("A", "down", 1),
    ]

    assert compress_moves(moves) == [
        Move("A", "up", 3),
        Move("A", "down", 1),
        Move("R", "right", 5),
        Move("A", "down", 1),
    ]
    assert compress_moves([]) == []


def test_compress_is_idempotent_and_inverts_expand():
    compressed = [Move("B", "left", 2), Move("A", "up", 2), Move("R", "right", 4)]

    assert compress_moves(compressed) == compressed
    assert len(expand_moves(compressed)) == 8
    assert all(move.spaces == 1 for move in expand_moves(compressed))
    assert compress_moves(expand_moves(compressed)) == compressed
