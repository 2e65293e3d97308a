"""
Static position evaluation for Tic-Tac-Toe Twist.

Scores every line window of win_length cells (same windows and wrap rules as
winner detection) plus a small bonus for central marks:

- Window with an obstacle, or with marks of both players: 0 (dead line)
- Window full of one player's marks: +/- win_bonus (sign flipped under misere)
- Window with only one player's marks: density_base ** marks, plus
  near_win_bonus with one slot left and open_end_bonus when the cells just
  beyond both ends are empty; opponent windows count negatively
- Center term: center_weight * (size - 1 - manhattan distance to center)
  per mark, own marks positive, opponent marks negative

The score is antisymmetric: evaluate(s, X) == -evaluate(s, O).
"""

from functools import lru_cache

import numpy as np

from ttt_twist.config import HEURISTIC_CONFIG
from ttt_twist.game.board import OBSTACLES, line_windows
from ttt_twist.game.types import Cell, GameState, Player


@lru_cache(maxsize=8)
def center_weights(size: int) -> np.ndarray:
    """Per-cell weight decaying with Manhattan distance from the geometric center."""
    center = (size - 1) / 2
    idx = np.arange(size)
    distance = np.abs(idx - center)[:, None] + np.abs(idx - center)[None, :]
    weights = np.rint(size - 1 - distance).astype(np.int64)
    weights.setflags(write=False)
    return weights


def _side_score(live: np.ndarray, counts: np.ndarray, ends_open: np.ndarray, win_length: int, cfg: dict) -> int:
    mask = live & (counts > 0) & (counts < win_length)
    score = int(np.power(cfg['density_base'], counts[mask].astype(np.int64)).sum())
    score += cfg['near_win_bonus'] * int(np.count_nonzero(mask & (counts == win_length - 1)))
    score += cfg['open_end_bonus'] * int(np.count_nonzero(mask & ends_open))
    return score


def evaluate(state: GameState, for_player: Player, cfg: dict = None) -> int:
    """
    Evaluate a position from for_player's perspective.

    Args:
        state: Position to score (terminal or not)
        for_player: Player the score is relative to
        cfg: Constants overriding HEURISTIC_CONFIG (optional)

    Returns:
        Signed integer score, higher is better for for_player
    """
    cfg = HEURISTIC_CONFIG if cfg is None else {**HEURISTIC_CONFIG, **cfg}
    config = state.config
    board = state.board
    size = state.size
    need = config.win_length

    table = line_windows(size, need, config.wrap)
    values = table.gather(board)

    own_cell = for_player.cell
    opp_cell = for_player.opponent.cell
    own = np.count_nonzero(values == own_cell, axis=1)
    opp = np.count_nonzero(values == opp_cell, axis=1)
    blocked = np.isin(values, OBSTACLES).any(axis=1)
    live = ~blocked & ~((own > 0) & (opp > 0))

    sign = -1 if config.misere else 1
    completed = int(np.count_nonzero(live & (own == need))) - int(np.count_nonzero(live & (opp == need)))
    score = sign * cfg['win_bonus'] * completed

    ends_open = (
        table.before_valid
        & table.after_valid
        & (board[table.before_rows, table.before_cols] == Cell.EMPTY)
        & (board[table.after_rows, table.after_cols] == Cell.EMPTY)
    )
    score += _side_score(live, own, ends_open, need, cfg)
    score -= _side_score(live, opp, ends_open, need, cfg)

    weights = center_weights(size)
    score += cfg['center_weight'] * (int(weights[board == own_cell].sum()) - int(weights[board == opp_cell].sum()))

    return int(score)
