# Game module

from .game import Game
from .twist import TicTacToeTwist
from .errors import IllegalMoveError, InvalidConfigError
from .types import (
    DRAW, Axis, Bomb, Cell, DoubleMove, GameState, LaneShift, Move,
    Placement, Player, Power, PowerUsage, VariantConfig,
)

__all__ = [
    'Game', 'TicTacToeTwist',
    'IllegalMoveError', 'InvalidConfigError',
    'DRAW', 'Axis', 'Bomb', 'Cell', 'DoubleMove', 'GameState', 'LaneShift', 'Move',
    'Placement', 'Player', 'Power', 'PowerUsage', 'VariantConfig',
]
