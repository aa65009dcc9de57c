"""
gridlock - shortest-path solver for 6x6 sliding-block puzzles

Core components:
- Vehicle, Move: the pieces on the board and the slides between layouts
- Board: one configuration, with move generation and the exit test
- solve: breadth-first search returning a compressed move list
- Playback: step through a solution forwards and backwards
"""

from .exceptions import GridlockError, InvalidDirection, InvalidLayout, VehicleNotFound
from .game import (
    EXIT_COL,
    EXIT_ROW,
    GRID_SIZE,
    HORIZONTAL,
    VERTICAL,
    Board,
    Move,
    Vehicle,
    can_place,
)
from .levels import Level, find_exit_vehicle, load_level, validate_layout
from .playback import Playback
from .search import SearchResult, compress_moves, expand_moves, search, solve
