"""Human-readable replay text and winning-line lookup. Coordinates shown 1-based."""

from typing import Optional

import numpy as np

from ttt_twist.game.board import line_windows
from ttt_twist.game.types import DRAW, Axis, Bomb, Coord, DoubleMove, GameState, LaneShift, Move, Placement, Player


def _coord(row, col) -> str:
    return f"({row + 1}, {col + 1})"


def format_move(move: Move, step: int, total: int) -> str:
    """
    One replay line, e.g. 'Move 3/7: X -> (2, 2)'.

    Args:
        move: Move from a game history (player should be set)
        step: 1-based index of the move
        total: Number of moves in the game
    """
    player = move.player.value if move.player is not None else '?'
    prefix = f"Move {step}/{total}: {player}"

    if isinstance(move, DoubleMove):
        return f"{prefix} Double Move -> {_coord(*move.first)} then {_coord(*move.second)}"
    if isinstance(move, LaneShift):
        if Axis(move.axis) is Axis.ROW:
            label, direction = 'Row', 'right' if move.direction == 1 else 'left'
        else:
            label, direction = 'Column', 'down' if move.direction == 1 else 'up'
        return f"{prefix} Lane Shift -> {label} {move.index + 1} {direction}"
    if isinstance(move, Bomb):
        return f"{prefix} Bomb -> scorched {_coord(move.row, move.col)}"
    if isinstance(move, Placement):
        return f"{prefix} -> {_coord(move.row, move.col)}"
    return f"{prefix} -> (n/a)"


def format_history(state: GameState) -> list[str]:
    total = len(state.moves)
    return [format_move(move, step, total) for step, move in enumerate(state.moves, start=1)]


def find_winning_line(state: GameState) -> Optional[list[Coord]]:
    """
    Cells of the run that decided the game, for highlighting.

    Under misere the run belongs to the loser. Wrapped runs that revisit a
    cell list it once.
    """
    if state.winner is None or state.winner == DRAW:
        return None

    config = state.config
    table = line_windows(state.size, config.win_length, config.wrap)
    values = table.gather(state.board)

    for player in Player:
        expected = player.opponent if config.misere else player
        if expected != state.winner:
            continue
        full = np.flatnonzero(np.all(values == player.cell, axis=1))
        if full.size == 0:
            continue
        index = full[0]
        line = []
        for r, c in zip(table.rows[index], table.cols[index]):
            coord = (int(r), int(c))
            if coord not in line:
                line.append(coord)
        return line

    return None
