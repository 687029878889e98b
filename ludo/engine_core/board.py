"""
Board Geometry - Constant data describing the Ludo board.

Position encoding used throughout the engine:
    -1        token in its starting base
    0..51     square on the shared circular track
    52..56    square in the colour's private home column
    57        finished
"""

from __future__ import annotations
from enum import Enum


class PlayerColor(str, Enum):
    """Player colours, one per seat."""
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"


BOARD_SIZE = 52
HOME_COLUMN_SIZE = 6  # 5 travelable squares + the finish square
HOME_COLUMN_START = 52
FINISH_POSITION = HOME_COLUMN_START + HOME_COLUMN_SIZE - 1  # 57
BASE_POSITION = -1

TOKENS_PER_PLAYER = 4
MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Start squares plus star squares
SAFE_ZONES: frozenset[int] = frozenset({0, 8, 13, 21, 26, 34, 39, 47})

# Track square each colour enters on when leaving base
START_POSITIONS: dict[PlayerColor, int] = {
    PlayerColor.RED: 0,
    PlayerColor.GREEN: 13,
    PlayerColor.YELLOW: 26,
    PlayerColor.BLUE: 39,
}

# Last track square of a colour's lap; the next step enters its home column
HOME_ENTRY: dict[PlayerColor, int] = {
    PlayerColor.RED: 51,
    PlayerColor.GREEN: 12,
    PlayerColor.YELLOW: 25,
    PlayerColor.BLUE: 38,
}

# Seat order by join order, clockwise from the red start square
COLOR_ROTATION: tuple[PlayerColor, ...] = (
    PlayerColor.RED,
    PlayerColor.GREEN,
    PlayerColor.YELLOW,
    PlayerColor.BLUE,
)


def is_on_track(position: int) -> bool:
    return 0 <= position < BOARD_SIZE


def is_in_home_column(position: int) -> bool:
    return HOME_COLUMN_START <= position < FINISH_POSITION


def is_safe_zone(position: int) -> bool:
    return position in SAFE_ZONES


def distance_from_start(color: PlayerColor, position: int) -> int:
    """Squares travelled from the colour's start square (track positions only)."""
    return (position - START_POSITIONS[color]) % BOARD_SIZE
