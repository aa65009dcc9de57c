from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .exceptions import InvalidDirection, InvalidLayout, VehicleNotFound


Cell = Tuple[int, int]
Position = Tuple[int, int]

GRID_SIZE = 6
EXIT_ROW = 2
EXIT_COL = GRID_SIZE - 1
DEFAULT_EXIT_ID = "R"
VEHICLE_LENGTHS = (2, 3)

HORIZONTAL = "H"
VERTICAL = "V"

# Negative direction first; move enumeration follows this order.
_DIRECTIONS: Dict[str, Tuple[str, str]] = {
    HORIZONTAL: ("left", "right"),
    VERTICAL: ("up", "down"),
}
_DIRECTION_VECTORS: Dict[Tuple[str, str], int] = {
    ("left", HORIZONTAL): -1,
    ("right", HORIZONTAL): 1,
    ("up", VERTICAL): -1,
    ("down", VERTICAL): 1,
}
_OPPOSITE = {"left": "right", "right": "left", "up": "down", "down": "up"}
_ORIENTATION_ALIASES = {
    "H": HORIZONTAL,
    "HORIZONTAL": HORIZONTAL,
    "E": HORIZONTAL,
    "W": HORIZONTAL,
    "V": VERTICAL,
    "VERTICAL": VERTICAL,
    "N": VERTICAL,
    "S": VERTICAL,
}

# Bits per slot in a packed key; a cell index is below 36.
_KEY_BITS = 6


def normalize_orientation(value: str) -> str:

    orientation = _ORIENTATION_ALIASES.get(str(value).strip().upper())
    if orientation is None:
        raise InvalidLayout(f"Unsupported orientation value: {value!r}")
    return orientation


def directions_for(orientation: str) -> Tuple[str, str]:

    return _DIRECTIONS[orientation]


def direction_vector(direction: str, orientation: str) -> int:

    try:
        return _DIRECTION_VECTORS[(direction, orientation)]
    except KeyError:
        raise InvalidDirection(
            f"Direction {direction!r} is not valid for orientation {orientation!r}"
        ) from None


def occupied_cells(row: int, col: int, orientation: str, length: int) -> Iterator[Cell]:

    if orientation == HORIZONTAL:
        for offset in range(length):
            yield row, col + offset
    else:
        for offset in range(length):
            yield row + offset, col


def within_grid(row: int, col: int) -> bool:

    return 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE


@dataclass(frozen=True)
class Vehicle:

    identifier: str
    orientation: str
    length: int
    row: int
    col: int

    def occupy_cells(self) -> Iterator[Cell]:

        return occupied_cells(self.row, self.col, self.orientation, self.length)

    def moved(self, delta: int) -> "Vehicle":

        if self.orientation == HORIZONTAL:
            return replace(self, col=self.col + delta)
        return replace(self, row=self.row + delta)


@dataclass(frozen=True)
class Move:

    vehicle_id: str
    direction: str
    spaces: int = 1

    def __post_init__(self) -> None:

        if self.direction not in _OPPOSITE:
            raise InvalidDirection(f"Unknown direction: {self.direction!r}")
        if self.spaces < 1:
            raise ValueError(f"Move spaces must be positive, got {self.spaces}")

    def reversed(self) -> "Move":

        return Move(self.vehicle_id, _OPPOSITE[self.direction], self.spaces)

    def __str__(self) -> str:

        if self.spaces == 1:
            return f"Move {self.vehicle_id} {self.direction}"
        return f"Move {self.vehicle_id} {self.direction} {self.spaces}"


def can_place(
    row: int,
    col: int,
    orientation: str,
    length: int,
    vehicles: Iterable[Vehicle],
    excluding: Union[Vehicle, str, None] = None,
) -> bool:

    cells = list(occupied_cells(row, col, orientation, length))
    if not all(within_grid(r, c) for r, c in cells):
        return False
    excluded_id = excluding.identifier if isinstance(excluding, Vehicle) else excluding
    taken = set()
    for vehicle in vehicles:
        if excluded_id is not None and vehicle.identifier == excluded_id:
            continue
        taken.update(vehicle.occupy_cells())
    return taken.isdisjoint(cells)


def check_layout(vehicles: Sequence[Vehicle]) -> Optional[str]:
    """Return the first problem with a vehicle layout, or None if it is legal."""

    seen: Dict[str, Vehicle] = {}
    placed: List[Vehicle] = []
    for vehicle in vehicles:
        if vehicle.identifier in seen:
            return f"Duplicate vehicle id {vehicle.identifier!r}"
        seen[vehicle.identifier] = vehicle
        if vehicle.orientation not in _DIRECTIONS:
            return (
                f"Vehicle {vehicle.identifier} has invalid orientation "
                f"{vehicle.orientation!r}"
            )
        if vehicle.length not in VEHICLE_LENGTHS:
            return (
                f"Vehicle {vehicle.identifier} has invalid length {vehicle.length} "
                f"(must be 2 or 3)"
            )
        if not all(within_grid(r, c) for r, c in vehicle.occupy_cells()):
            return f"Vehicle {vehicle.identifier} extends beyond the grid"
        if not can_place(
            vehicle.row, vehicle.col, vehicle.orientation, vehicle.length, placed
        ):
            return f"Vehicle {vehicle.identifier} overlaps another vehicle"
        placed.append(vehicle)
    return None


class Board:
    """One configuration of a fixed vehicle set.

    Vehicles get a slot in sorted identifier order when the board is built;
    derived boards share that table and only carry a tuple of positions.
    """

    __slots__ = ("_table", "_slots", "_exit_slot", "positions")

    def __init__(self, vehicles: Iterable[Vehicle], exit_vehicle_id: str) -> None:

        table = sorted(
            (
                Vehicle(
                    identifier=str(vehicle.identifier),
                    orientation=vehicle.orientation,
                    length=int(vehicle.length),
                    row=int(vehicle.row),
                    col=int(vehicle.col),
                )
                for vehicle in vehicles
            ),
            key=lambda vehicle: vehicle.identifier,
        )
        slots = {vehicle.identifier: slot for slot, vehicle in enumerate(table)}
        if len(slots) != len(table):
            raise InvalidLayout("Vehicle ids must be unique")
        exit_vehicle_id = str(exit_vehicle_id)
        if exit_vehicle_id not in slots:
            raise VehicleNotFound(f"Exit vehicle {exit_vehicle_id!r} is not on the board")
        problem = check_layout(table)
        if problem:
            raise InvalidLayout(problem)

        self._table: Tuple[Vehicle, ...] = tuple(table)
        self._slots: Dict[str, int] = slots
        self._exit_slot: int = slots[exit_vehicle_id]
        self.positions: Tuple[Position, ...] = tuple(
            (vehicle.row, vehicle.col) for vehicle in table
        )

    def _derive(self, positions: Tuple[Position, ...]) -> "Board":

        board = Board.__new__(Board)
        board._table = self._table
        board._slots = self._slots
        board._exit_slot = self._exit_slot
        board.positions = positions
        return board

    @property
    def exit_vehicle_id(self) -> str:

        return self._table[self._exit_slot].identifier

    @property
    def vehicle_ids(self) -> Tuple[str, ...]:

        return tuple(vehicle.identifier for vehicle in self._table)

    @property
    def vehicles(self) -> List[Vehicle]:

        return [
            replace(vehicle, row=row, col=col)
            for vehicle, (row, col) in zip(self._table, self.positions)
        ]

    def vehicle(self, identifier: str) -> Vehicle:

        slot = self._slot_of(identifier)
        row, col = self.positions[slot]
        return replace(self._table[slot], row=row, col=col)

    def _slot_of(self, identifier: str) -> int:

        try:
            return self._slots[str(identifier)]
        except KeyError:
            raise VehicleNotFound(f"Vehicle {identifier!r} is not on the board") from None

    def _occupancy(self) -> List[bool]:

        grid = [False] * (GRID_SIZE * GRID_SIZE)
        for vehicle, (row, col) in zip(self._table, self.positions):
            for r, c in occupied_cells(row, col, vehicle.orientation, vehicle.length):
                grid[r * GRID_SIZE + c] = True
        return grid

    def valid_moves(self) -> List[Move]:

        grid = self._occupancy()
        moves: List[Move] = []
        for vehicle, (row, col) in zip(self._table, self.positions):
            for direction in _DIRECTIONS[vehicle.orientation]:
                step = _DIRECTION_VECTORS[(direction, vehicle.orientation)]
                spaces = 1
                while True:
                    if vehicle.orientation == HORIZONTAL:
                        edge = col if step < 0 else col + vehicle.length - 1
                        r, c = row, edge + step * spaces
                    else:
                        edge = row if step < 0 else row + vehicle.length - 1
                        r, c = edge + step * spaces, col
                    if not within_grid(r, c) or grid[r * GRID_SIZE + c]:
                        break
                    moves.append(Move(vehicle.identifier, direction, spaces))
                    spaces += 1
        return moves

    def apply(self, move: Move) -> "Board":

        slot = self._slot_of(move.vehicle_id)
        vehicle = self._table[slot]
        delta = direction_vector(move.direction, vehicle.orientation) * move.spaces
        row, col = self.positions[slot]
        if vehicle.orientation == HORIZONTAL:
            col += delta
        else:
            row += delta
        positions = list(self.positions)
        positions[slot] = (row, col)
        return self._derive(tuple(positions))

    def is_goal(self) -> bool:

        vehicle = self._table[self._exit_slot]
        row, col = self.positions[self._exit_slot]
        return any(
            c == EXIT_COL
            for _, c in occupied_cells(row, col, vehicle.orientation, vehicle.length)
        )

    def is_valid(self) -> bool:

        return check_layout(self.vehicles) is None

    def key(self) -> int:

        packed = 0
        for slot, (row, col) in enumerate(self.positions):
            packed |= (row * GRID_SIZE + col) << (_KEY_BITS * slot)
        return packed

    def __eq__(self, other: object) -> bool:

        if not isinstance(other, Board):
            return NotImplemented
        return self.vehicle_ids == other.vehicle_ids and self.positions == other.positions

    def __hash__(self) -> int:

        return hash((self.vehicle_ids, self.positions))

    def __repr__(self) -> str:

        placed = ", ".join(
            f"{identifier}@{row},{col}"
            for identifier, (row, col) in zip(self.vehicle_ids, self.positions)
        )
        return f"Board([{placed}], exit={self.exit_vehicle_id!r})"
