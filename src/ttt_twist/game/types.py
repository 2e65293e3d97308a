"""
Value types shared by the rules engine and the search.

Board representation:
- 2D numpy int8 array of Cell codes, row 0 at the top
- States are frozen; apply_move builds a fresh board for every new state
- Every type here converts to plain JSON data (see serialization.py)
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import FrozenSet, Optional, Tuple, Union

import numpy as np


DRAW = 'Draw'

Coord = Tuple[int, int]


class Cell(IntEnum):
    """Contents of a single board position."""
    EMPTY = 0
    X = 1
    O = 2
    BLOCKED = 3   # Obstacle placed at game start
    BOMBED = 4    # Destroyed by the bomb power, never playable again


class Player(str, Enum):
    X = 'X'
    O = 'O'

    @property
    def opponent(self) -> 'Player':
        return Player.O if self is Player.X else Player.X

    @property
    def cell(self) -> Cell:
        return Cell.X if self is Player.X else Cell.O


class Power(str, Enum):
    """One-time powers, each usable once per player per game."""
    DOUBLE_MOVE = 'doubleMove'
    LANE_SHIFT = 'laneShift'
    BOMB = 'bomb'


class Axis(str, Enum):
    ROW = 'row'
    COLUMN = 'column'


@dataclass(frozen=True)
class VariantConfig:
    """
    Rules for one game. Created once and embedded in every GameState.

    Attributes:
        board_size: Board edge length (3-6)
        win_length: Marks in a row needed to complete a line (3 or 4)
        gravity: Placements drop down their column
        wrap: Lines continue across opposite edges
        misere: Completing a line loses instead of wins
        random_blocks: Upper bound on obstacles placed at game start
        double_move, lane_shift, bomb: One-time powers enabled for both players
        chaos_mode: Rules were rolled at random (informational only)
    """
    board_size: int = 3
    win_length: int = 3
    gravity: bool = False
    wrap: bool = False
    misere: bool = False
    random_blocks: int = 0
    double_move: bool = False
    lane_shift: bool = False
    bomb: bool = False
    chaos_mode: bool = False

    def power_enabled(self, power: Power) -> bool:
        if power is Power.DOUBLE_MOVE:
            return self.double_move
        if power is Power.LANE_SHIFT:
            return self.lane_shift
        return self.bomb


@dataclass(frozen=True)
class PowerUsage:
    """Which (power, player) pairs have already been spent."""
    used: FrozenSet[Tuple[Power, Player]] = frozenset()

    def has_used(self, power: Power, player: Player) -> bool:
        return (power, player) in self.used

    def mark_used(self, power: Power, player: Player) -> 'PowerUsage':
        return PowerUsage(self.used | {(power, player)})

    def as_flags(self) -> dict:
        return {
            power.value: {player.value: self.has_used(power, player) for player in Player}
            for power in Power
        }


@dataclass(frozen=True)
class Placement:
    """Place a mark at (row, col)."""
    row: int
    col: int
    player: Optional[Player] = None

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)


@dataclass(frozen=True)
class DoubleMove:
    """Place two marks in one turn. Stored in history with resolved coordinates."""
    first: Coord
    second: Coord
    player: Optional[Player] = None


@dataclass(frozen=True)
class LaneShift:
    """Cyclically shift a row or column by one position."""
    axis: Axis
    index: int
    direction: int  # +1 or -1
    player: Optional[Player] = None


@dataclass(frozen=True)
class Bomb:
    """Destroy the cell at (row, col)."""
    row: int
    col: int
    player: Optional[Player] = None


Move = Union[Placement, DoubleMove, LaneShift, Bomb]


def with_player(move: Move, player: Player) -> Move:
    """Return a copy of the move tagged with the acting player."""
    return replace(move, player=player)


@dataclass(frozen=True, eq=False)
class GameState:
    """
    Complete game position.

    The state keeps a private read-only copy of the board it is given, so a
    state can be shared freely and the caller's array stays writable.
    """
    board: np.ndarray
    current: Player
    config: VariantConfig
    moves: Tuple[Move, ...] = ()
    powers: PowerUsage = field(default_factory=PowerUsage)
    winner: Optional[str] = None
    last_move: Optional[Move] = None

    def __post_init__(self):
        board = np.array(self.board, dtype=np.int8)
        board.setflags(write=False)
        object.__setattr__(self, 'board', board)

    @property
    def size(self) -> int:
        return self.board.shape[0]

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def __repr__(self):
        return (
            f"GameState({self.size}x{self.size}, current={self.current.value}, "
            f"moves={len(self.moves)}, winner={self.winner})"
        )
