from __future__ import annotations

from typing import Iterable, List, Optional

from .exceptions import InvalidLayout
from .game import Board, Move, Vehicle


class Playback:

    def __init__(
        self, vehicles: Iterable[Vehicle], moves: Iterable[Move], exit_vehicle_id: str
    ) -> None:

        self.initial_board = Board(vehicles, exit_vehicle_id)
        self.board = self.initial_board
        self.moves: List[Move] = list(moves)
        self.index: int = 0

    @property
    def vehicles(self) -> List[Vehicle]:

        return self.board.vehicles

    @property
    def current_move(self) -> Optional[Move]:

        if self.index == 0:
            return None
        return self.moves[self.index - 1]

    @property
    def remaining(self) -> int:

        return len(self.moves) - self.index

    def step_forward(self) -> bool:

        if self.index >= len(self.moves):
            return False
        self.board = self._checked_apply(self.moves[self.index])
        self.index += 1
        return True

    def step_backward(self) -> bool:

        if self.index == 0:
            return False
        self.board = self._checked_apply(self.moves[self.index - 1].reversed())
        self.index -= 1
        return True

    def run_to_end(self) -> None:

        while self.step_forward():
            pass

    def reset(self) -> None:

        self.board = self.initial_board
        self.index = 0

    def is_solved(self) -> bool:

        return self.board.is_goal()

    def _checked_apply(self, move: Move) -> Board:

        # One cell at a time so a slide cannot jump over another vehicle.
        board = self.board
        step = Move(move.vehicle_id, move.direction, 1)
        for _ in range(move.spaces):
            board = board.apply(step)
            if not board.is_valid():
                raise InvalidLayout(f"{move} leaves the board in an illegal state")
        return board
