from __future__ import annotations

from pathlib import Path

import pytest

from gridlock.game import HORIZONTAL, VERTICAL, Vehicle


@pytest.fixture
def puzzle_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "puzzles"


@pytest.fixture
def open_road():
    # Exit vehicle on the exit row with a truck parked on row 0.
    return [
        Vehicle("R", HORIZONTAL, 2, 2, 0),
        Vehicle("A", HORIZONTAL, 3, 0, 0),
    ]


@pytest.fixture
def single_blocker():
    return [
        Vehicle("R", HORIZONTAL, 2, 2, 0),
        Vehicle("A", VERTICAL, 2, 2, 3),
    ]


@pytest.fixture
def boxed_in():
    # A can only leave the exit row upward once B clears row 0 above it.
    return [
        Vehicle("R", HORIZONTAL, 2, 2, 0),
        Vehicle("A", VERTICAL, 2, 2, 3),
        Vehicle("B", HORIZONTAL, 2, 0, 2),
        Vehicle("C", VERTICAL, 2, 4, 3),
    ]
