"""Level files: loading a vehicle layout and the editor's placement rules.

A level is a JSON object::

    {
      "name": "beginner_01",
      "exit": "R",
      "cars": {
        "R": {"row": 2, "col": 0, "dir": "H", "len": 2},
        "A": {"row": 0, "col": 5, "dir": "V", "len": 3}
      }
    }

``x``/``y`` are accepted in place of ``col``/``row``. Without ``"cars"`` every
top-level object that looks like a vehicle is taken as one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .exceptions import InvalidLayout
from .game import (
    DEFAULT_EXIT_ID,
    EXIT_ROW,
    HORIZONTAL,
    Vehicle,
    check_layout,
    normalize_orientation,
)


@dataclass(frozen=True)
class Level:

    name: str
    vehicles: Tuple[Vehicle, ...]
    exit_vehicle_id: str


def load_level(file_path: Union[str, Path]) -> Level:

    path = Path(file_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidLayout(f"{path.name} is not valid JSON: {exc}") from exc
    return level_from_dict(data, name=path.stem)


def level_from_dict(data: Any, name: str = "") -> Level:

    if not isinstance(data, dict):
        raise InvalidLayout("A level must be a JSON object")
    cars_payload = data.get("cars")
    if cars_payload is None:
        cars_payload = {
            key: value
            for key, value in data.items()
            if isinstance(value, dict) and _looks_like_vehicle(value)
        }
    vehicles = parse_vehicles(cars_payload)
    exit_vehicle_id = data.get("exit") or find_exit_vehicle(vehicles)
    if exit_vehicle_id is None:
        raise InvalidLayout("No exit vehicle found in level")
    return Level(
        name=str(data.get("name") or name),
        vehicles=tuple(vehicles),
        exit_vehicle_id=str(exit_vehicle_id),
    )


def _looks_like_vehicle(attrs: Dict[str, Any]) -> bool:

    has_length = "len" in attrs or "length" in attrs
    has_position = {"row", "col"}.issubset(attrs) or {"x", "y"}.issubset(attrs)
    return has_length and has_position


def parse_vehicles(payload: Union[Dict[str, Any], Sequence[Dict[str, Any]]]) -> List[Vehicle]:

    if isinstance(payload, dict):
        entries = list(payload.items())
    elif isinstance(payload, (list, tuple)):
        entries = []
        for attrs in payload:
            if not isinstance(attrs, dict) or "id" not in attrs:
                raise InvalidLayout(f"Vehicle entry without an id: {attrs!r}")
            entries.append((attrs["id"], attrs))
    else:
        raise InvalidLayout("Vehicles must be a mapping or a list")

    vehicles: List[Vehicle] = []
    for car_id, attrs in entries:
        try:
            vehicles.append(
                Vehicle(
                    identifier=str(car_id),
                    orientation=normalize_orientation(
                        attrs.get(
                            "heading", attrs.get("dir", attrs.get("orientation", HORIZONTAL))
                        )
                    ),
                    length=int(attrs["len"] if "len" in attrs else attrs["length"]),
                    row=int(attrs["row"] if "row" in attrs else attrs["y"]),
                    col=int(attrs["col"] if "col" in attrs else attrs["x"]),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise InvalidLayout(f"Malformed vehicle {car_id!r}: {exc}") from exc
    return vehicles


def find_exit_vehicle(
    vehicles: Iterable[Vehicle], preferred: str = DEFAULT_EXIT_ID
) -> Optional[str]:

    candidates = list(vehicles)
    for vehicle in candidates:
        if vehicle.identifier == preferred:
            return vehicle.identifier
    for vehicle in candidates:
        if vehicle.orientation == HORIZONTAL and vehicle.length == 2 and vehicle.row == EXIT_ROW:
            return vehicle.identifier
    return None


def validate_layout(
    vehicles: Sequence[Vehicle], exit_vehicle_id: Optional[str] = None
) -> Tuple[bool, Optional[str]]:

    problem = check_layout(vehicles)
    if problem:
        return False, problem
    if exit_vehicle_id is None:
        return True, None

    exit_vehicle = next(
        (vehicle for vehicle in vehicles if vehicle.identifier == exit_vehicle_id), None
    )
    if exit_vehicle is None:
        return False, f"Missing exit vehicle {exit_vehicle_id!r}"
    if exit_vehicle.orientation != HORIZONTAL:
        return False, "Exit vehicle must be horizontal"
    if exit_vehicle.row != EXIT_ROW:
        return False, f"Exit vehicle should be on row {EXIT_ROW}"
    return True, None
