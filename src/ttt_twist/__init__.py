"""
Tic-Tac-Toe Twist: rules engine and alpha-beta search for tic-tac-toe
variants (gravity, wrap, misere, random blocks, one-time powers).
"""

from .game.errors import IllegalMoveError, InvalidConfigError
from .game.rules import (
    apply_move,
    can_use_bomb,
    can_use_double_move,
    can_use_lane_shift,
    check_winner,
    create_game,
    is_bomb_legal,
    is_double_move_first_placement_legal,
    is_double_move_legal,
    is_lane_shift_legal,
    is_move_legal,
    legal_moves,
)
from .game.types import (
    DRAW, Axis, Bomb, Cell, DoubleMove, GameState, LaneShift, Move,
    Placement, Player, Power, PowerUsage, VariantConfig,
)
from .game.variants import chaos_config, config_problem, default_config, validate_config
from .game.notation import find_winning_line, format_history, format_move
from .game.serialization import (
    config_from_dict, config_to_dict, dumps, loads,
    move_from_dict, move_to_dict, state_from_dict, state_to_dict,
)
from .engine.alphabeta import best_move
from .engine.difficulty import Difficulty, choose_move
from .engine.heuristics import evaluate

__version__ = "0.1"
