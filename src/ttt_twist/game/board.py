"""
Board helpers for Tic-Tac-Toe Twist.

Board: size x size numpy int8 array of Cell codes, row 0 at the top.
All helpers that change contents return a new array; the input is left alone.

Line windows (runs of win_length cells in the 4 line directions) are
precomputed once per (size, win_length, wrap) as index arrays, so winner
detection and evaluation can read every window in a single numpy gather.
"""

from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from ttt_twist.game.types import Axis, Cell, Coord, Player


# Directions: horizontal, vertical, diagonal (down-right), diagonal (down-left)
DIRECTIONS = [(0, 1), (1, 0), (1, 1), (1, -1)]

OBSTACLES = (Cell.BLOCKED, Cell.BOMBED)


def create_board(size: int) -> np.ndarray:
    return np.full((size, size), Cell.EMPTY, dtype=np.int8)


def in_bounds(size: int, row: int, col: int) -> bool:
    if not isinstance(row, (int, np.integer)) or not isinstance(col, (int, np.integer)):
        return False
    return 0 <= row < size and 0 <= col < size


def place(board: np.ndarray, row: int, col: int, player: Player) -> np.ndarray:
    """Return a copy of the board with the player's mark at (row, col)."""
    next_board = board.copy()
    next_board[row, col] = player.cell
    return next_board


def apply_gravity(board: np.ndarray, row: int, col: int) -> Coord:
    """
    Resolve a gravity placement.

    The piece falls from (row, col) down the same column and stops above the
    first non-empty cell (mark, block or bomb crater) or at the bottom row.
    """
    size = board.shape[0]
    landing = row
    while landing + 1 < size and board[landing + 1, col] == Cell.EMPTY:
        landing += 1
    return (landing, col)


def empty_cells(board: np.ndarray) -> list[Coord]:
    """Empty coordinates in row-major order."""
    return [(int(r), int(c)) for r, c in np.argwhere(board == Cell.EMPTY)]


def player_marks(board: np.ndarray, player: Player) -> list[Coord]:
    return [(int(r), int(c)) for r, c in np.argwhere(board == player.cell)]


def are_adjacent(a: Coord, b: Coord) -> bool:
    """8-directional adjacency (Chebyshev distance <= 1)."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1])) <= 1


def adjacent_to_any(target: Coord, marks) -> bool:
    return any(are_adjacent(target, mark) for mark in marks)


def shift_lane(board: np.ndarray, axis: Axis, index: int, direction: int) -> np.ndarray:
    """
    Cyclically shift one row or column by one position.

    direction=+1 moves contents right (row) or down (column); the cell that
    falls off one end reappears at the other. Blocks and craters move too.
    """
    next_board = board.copy()
    if axis is Axis.ROW:
        next_board[index, :] = np.roll(board[index, :], direction)
    else:
        next_board[:, index] = np.roll(board[:, index], direction)
    return next_board


@dataclass(frozen=True)
class WindowTable:
    """
    Every line window of a board geometry, as index arrays.

    Attributes:
        rows, cols: (num_windows, win_length) coordinates of each window's cells
        before_rows, before_cols: cell just before each window
        after_rows, after_cols: cell just after each window
        before_valid, after_valid: whether that extension cell exists
    """
    rows: np.ndarray
    cols: np.ndarray
    before_rows: np.ndarray
    before_cols: np.ndarray
    before_valid: np.ndarray
    after_rows: np.ndarray
    after_cols: np.ndarray
    after_valid: np.ndarray

    def __len__(self):
        return self.rows.shape[0]

    def gather(self, board: np.ndarray) -> np.ndarray:
        """Cell codes of every window, shape (num_windows, win_length)."""
        return board[self.rows, self.cols]


@lru_cache(maxsize=64)
def line_windows(size: int, win_length: int, wrap: bool) -> WindowTable:
    """
    Build the window table for a board geometry.

    Windows are generated from every start cell in row-major order and, per
    cell, in DIRECTIONS order. Without wrap, windows leaving the board are
    skipped; with wrap, coordinates are taken modulo the board size.
    """
    rows, cols = [], []
    before, after = [], []

    for sr in range(size):
        for sc in range(size):
            for dr, dc in DIRECTIONS:
                cells = [(sr + dr * k, sc + dc * k) for k in range(win_length)]
                prev_cell = (sr - dr, sc - dc)
                next_cell = (sr + dr * win_length, sc + dc * win_length)

                if wrap:
                    cells = [(r % size, c % size) for r, c in cells]
                    # Extension cells only exist while they differ from the window itself
                    has_ends = win_length < size
                    before.append((prev_cell[0] % size, prev_cell[1] % size, has_ends))
                    after.append((next_cell[0] % size, next_cell[1] % size, has_ends))
                else:
                    if not all(in_bounds(size, r, c) for r, c in cells):
                        continue
                    before.append((*_clamp(size, prev_cell), in_bounds(size, *prev_cell)))
                    after.append((*_clamp(size, next_cell), in_bounds(size, *next_cell)))

                rows.append([r for r, _ in cells])
                cols.append([c for _, c in cells])

    table = WindowTable(
        rows=np.array(rows, dtype=np.intp).reshape(-1, win_length),
        cols=np.array(cols, dtype=np.intp).reshape(-1, win_length),
        before_rows=np.array([b[0] for b in before], dtype=np.intp),
        before_cols=np.array([b[1] for b in before], dtype=np.intp),
        before_valid=np.array([b[2] for b in before], dtype=bool),
        after_rows=np.array([a[0] for a in after], dtype=np.intp),
        after_cols=np.array([a[1] for a in after], dtype=np.intp),
        after_valid=np.array([a[2] for a in after], dtype=bool),
    )
    for array in vars(table).values():
        array.setflags(write=False)
    return table


def _clamp(size: int, cell: Coord) -> Coord:
    # Placeholder index for extension cells that fall off the board (masked by *_valid)
    return (min(max(cell[0], 0), size - 1), min(max(cell[1], 0), size - 1))


def board_to_text(board: np.ndarray) -> str:
    """Compact text form, one row per line: '.', 'X', 'O', '#' (block), '*' (crater)."""
    symbols = {Cell.EMPTY: '.', Cell.X: 'X', Cell.O: 'O', Cell.BLOCKED: '#', Cell.BOMBED: '*'}
    return '\n'.join(''.join(symbols[Cell(v)] for v in row) for row in board)


def board_from_text(text: str) -> np.ndarray:
    """Inverse of board_to_text. Handy for building positions in tests and tools."""
    codes = {'.': Cell.EMPTY, 'X': Cell.X, 'O': Cell.O, '#': Cell.BLOCKED, '*': Cell.BOMBED}
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    size = len(lines)
    if any(len(line) != size for line in lines):
        raise ValueError(f"Board text must be square, got rows of length {[len(l) for l in lines]}")
    board = create_board(size)
    for r, line in enumerate(lines):
        for c, symbol in enumerate(line):
            if symbol not in codes:
                raise ValueError(f"Unknown board symbol {symbol!r} at ({r}, {c})")
            board[r, c] = codes[symbol]
    return board
