"""
Rules engine for Tic-Tac-Toe Twist.

Functions here take a GameState and never modify it: apply_move builds the
next state from a copied board. Illegal moves raise IllegalMoveError; callers
are expected to pre-filter with legal_moves / can_use_* / is_*_legal.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ttt_twist.game.board import (
    adjacent_to_any,
    apply_gravity,
    create_board,
    empty_cells,
    in_bounds,
    line_windows,
    place,
    player_marks,
    shift_lane,
)
from ttt_twist.game.errors import IllegalMoveError
from ttt_twist.game.types import (
    DRAW,
    Axis,
    Bomb,
    Cell,
    Coord,
    DoubleMove,
    GameState,
    LaneShift,
    Move,
    Placement,
    Player,
    Power,
    VariantConfig,
)

logger = logging.getLogger(__name__)


def create_game(config: VariantConfig, rng: Optional[np.random.Generator] = None) -> GameState:
    """
    Start a new game.

    With random_blocks = N > 0, between 1 and min(N, size^2 // 4) cells are
    blocked at distinct random positions. The config is assumed valid
    (see variants.validate_config).

    Args:
        config: Variant rules for this game
        rng: Random generator for block placement (default: fresh generator)

    Returns:
        State with X to move, no history and no powers spent
    """
    size = config.board_size
    board = create_board(size)

    max_blocks = min(config.random_blocks, (size * size) // 4)
    if max_blocks > 0:
        rng = rng if rng is not None else np.random.default_rng()
        count = int(rng.integers(1, max_blocks + 1))
        cells = rng.choice(size * size, size=count, replace=False)
        board.flat[cells] = Cell.BLOCKED

    return GameState(board=board, current=Player.X, config=config)


def legal_moves(state: GameState) -> list[Placement]:
    """Every empty cell as a placement, row-major. Empty once the game is over."""
    if state.winner is not None:
        return []
    return [Placement(r, c) for r, c in empty_cells(state.board)]


def check_winner(state: GameState):
    """
    Decide the game result for the current board.

    Returns:
        Player.X, Player.O, DRAW, or None while the game continues
    """
    return board_winner(state.board, state.config)


def board_winner(board: np.ndarray, config: VariantConfig):
    """
    Scan every line window for a complete run of one player's marks.

    Obstacles never belong to a run. The first complete window in scan order
    decides; under misere the player who completed it loses.
    """
    table = line_windows(board.shape[0], config.win_length, config.wrap)
    values = table.gather(board)
    x_full = np.all(values == Cell.X, axis=1)
    o_full = np.all(values == Cell.O, axis=1)

    complete = np.flatnonzero(x_full | o_full)
    if complete.size > 0:
        owner = Player.X if x_full[complete[0]] else Player.O
        return owner.opponent if config.misere else owner

    if not np.any(board == Cell.EMPTY):
        return DRAW
    return None


# ----------------------------------------------------------------------------
# Power availability
# ----------------------------------------------------------------------------

def _can_use(state: GameState, power: Power) -> bool:
    if not state.config.power_enabled(power):
        return False
    return not state.powers.has_used(power, state.current)


def can_use_double_move(state: GameState) -> bool:
    return _can_use(state, Power.DOUBLE_MOVE)


def can_use_lane_shift(state: GameState) -> bool:
    return _can_use(state, Power.LANE_SHIFT)


def can_use_bomb(state: GameState) -> bool:
    return _can_use(state, Power.BOMB)


# ----------------------------------------------------------------------------
# Move resolution (None means illegal)
# ----------------------------------------------------------------------------

def _resolve_on(board: np.ndarray, target: Coord, gravity: bool) -> Optional[Coord]:
    row, col = target
    if not in_bounds(board.shape[0], row, col) or board[row, col] != Cell.EMPTY:
        return None
    return apply_gravity(board, row, col) if gravity else (row, col)


def resolve_placement(state: GameState, move: Placement) -> Optional[Coord]:
    """Final coordinates of a placement after gravity, or None if it is illegal."""
    return _resolve_on(state.board, (move.row, move.col), state.config.gravity)


def _resolve_double_move(state: GameState, move: DoubleMove) -> Optional[Tuple[np.ndarray, Tuple[Coord, Coord]]]:
    if not _can_use(state, Power.DOUBLE_MOVE):
        return None

    first, second = tuple(move.first), tuple(move.second)
    if first == second:
        return None
    legal = set(empty_cells(state.board))
    if first not in legal or second not in legal:
        return None

    player = state.current
    own_marks = player_marks(state.board, player)

    # Gravity can change where each piece lands depending on order
    for order in ((first, second), (second, first)):
        board = state.board
        finals = []
        for target in order:
            final = _resolve_on(board, target, state.config.gravity)
            if final is None or adjacent_to_any(final, own_marks + finals):
                break
            board = place(board, final[0], final[1], player)
            finals.append(final)
        else:
            return board, (finals[0], finals[1])

    return None


def _resolve_lane_shift(state: GameState, move: LaneShift) -> Optional[np.ndarray]:
    if not _can_use(state, Power.LANE_SHIFT):
        return None
    try:
        axis = Axis(move.axis)
    except ValueError:
        return None
    if move.direction not in (1, -1):
        return None
    if not isinstance(move.index, (int, np.integer)) or not 0 <= move.index < state.size:
        return None
    return shift_lane(state.board, axis, int(move.index), move.direction)


def _resolve_bomb(state: GameState, move: Bomb) -> Optional[np.ndarray]:
    if not _can_use(state, Power.BOMB):
        return None
    if not in_bounds(state.size, move.row, move.col):
        return None
    board = state.board.copy()
    board[move.row, move.col] = Cell.BOMBED
    return board


def is_double_move_legal(state: GameState, move: DoubleMove) -> bool:
    return _resolve_double_move(state, move) is not None


def is_double_move_first_placement_legal(state: GameState, move: Placement) -> bool:
    """
    Check the first half of a double move on its own.

    Used to grey out cells while the player picks their first target: the
    placement must be legal and must not land next to one of their marks.
    """
    if not _can_use(state, Power.DOUBLE_MOVE):
        return False
    final = resolve_placement(state, move)
    if final is None:
        return False
    return not adjacent_to_any(final, player_marks(state.board, state.current))


def is_lane_shift_legal(state: GameState, move: LaneShift) -> bool:
    return _resolve_lane_shift(state, move) is not None


def is_bomb_legal(state: GameState, move: Bomb) -> bool:
    return _resolve_bomb(state, move) is not None


def is_move_legal(state: GameState, move: Move) -> bool:
    """Legality check for any move variant, mirroring apply_move without raising."""
    if state.winner is not None:
        return False
    if isinstance(move, DoubleMove):
        return is_double_move_legal(state, move)
    if isinstance(move, LaneShift):
        return is_lane_shift_legal(state, move)
    if isinstance(move, Bomb):
        return is_bomb_legal(state, move)
    if isinstance(move, Placement):
        return resolve_placement(state, move) is not None
    return False


# ----------------------------------------------------------------------------
# Applying moves
# ----------------------------------------------------------------------------

def _illegal(state: GameState, move: Move, reason: str) -> IllegalMoveError:
    logger.debug("Rejected %r for %s: %s", move, state.current.value, reason)
    return IllegalMoveError(f"Illegal move {move!r}: {reason}")


def _check_power(state: GameState, move: Move, power: Power):
    if not state.config.power_enabled(power):
        raise _illegal(state, move, f"{power.value} is disabled for this game")
    if state.powers.has_used(power, state.current):
        raise _illegal(state, move, f"{state.current.value} already used {power.value}")


def apply_move(state: GameState, move: Move) -> GameState:
    """
    Play a move for the side to move.

    Args:
        state: Current state (left untouched)
        move: Placement, DoubleMove, LaneShift or Bomb

    Returns:
        Next state: turn flipped, move recorded with resolved coordinates,
        winner recomputed

    Raises:
        IllegalMoveError: finished game, occupied or out-of-range target,
            power disabled or spent, or a power constraint violation
    """
    if state.winner is not None:
        raise _illegal(state, move, f"game is already over ({state.winner})")

    player = state.current
    powers = state.powers

    if isinstance(move, DoubleMove):
        _check_power(state, move, Power.DOUBLE_MOVE)
        resolved = _resolve_double_move(state, move)
        if resolved is None:
            raise _illegal(state, move, "targets must be empty, distinct and not adjacent to own marks")
        board, (first, second) = resolved
        recorded = DoubleMove(first=first, second=second, player=player)
        powers = powers.mark_used(Power.DOUBLE_MOVE, player)

    elif isinstance(move, LaneShift):
        _check_power(state, move, Power.LANE_SHIFT)
        board = _resolve_lane_shift(state, move)
        if board is None:
            raise _illegal(state, move, "invalid axis, index or direction")
        recorded = LaneShift(axis=Axis(move.axis), index=int(move.index), direction=move.direction, player=player)
        powers = powers.mark_used(Power.LANE_SHIFT, player)

    elif isinstance(move, Bomb):
        _check_power(state, move, Power.BOMB)
        board = _resolve_bomb(state, move)
        if board is None:
            raise _illegal(state, move, "target is off the board")
        recorded = Bomb(row=move.row, col=move.col, player=player)
        powers = powers.mark_used(Power.BOMB, player)

    elif isinstance(move, Placement):
        final = resolve_placement(state, move)
        if final is None:
            raise _illegal(state, move, "target is occupied or off the board")
        board = place(state.board, final[0], final[1], player)
        recorded = Placement(row=final[0], col=final[1], player=player)

    else:
        raise IllegalMoveError(f"Unknown move type: {type(move).__name__}")

    return GameState(
        board=board,
        current=player.opponent,
        config=state.config,
        moves=state.moves + (recorded,),
        powers=powers,
        winner=board_winner(board, state.config),
        last_move=recorded,
    )