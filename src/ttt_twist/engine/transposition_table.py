"""
Position cache shared by every node of one alpha-beta search.

Positions from depth D-1 are reused when iterative deepening searches depth D, and
transpositions (the same board reached through different move orders) are
searched once.

Notes:
- Canonical string key: board contents, side to move, and every variant flag
  that changes the rules (two positions with equal keys play identically)
- Bounds: EXACT inside the window, LOWER after a beta cutoff, UPPER when every move failed low
- Replacement policy: Depth-preferred (keep deeper searches)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ttt_twist.game.types import Cell, GameState, Move


CELL_SYMBOLS = {Cell.EMPTY: '.', Cell.X: 'X', Cell.O: 'O', Cell.BLOCKED: 'B', Cell.BOMBED: 'F'}


def position_key(state: GameState) -> str:
    """
    Canonical key for a position, e.g. 'X.O/.X./..O/|X|3-g----'.

    Layout: rows separated by '/', then side to move, win length, and one
    character per flag (wrap, gravity, misere, double move, lane shift, bomb).
    """
    rows = '/'.join(''.join(CELL_SYMBOLS[Cell(v)] for v in row) for row in state.board)
    config = state.config
    flags = ''.join([
        'w' if config.wrap else '-',
        'g' if config.gravity else '-',
        'm' if config.misere else '-',
        'd' if config.double_move else '-',
        'l' if config.lane_shift else '-',
        'b' if config.bomb else '-',
    ])
    return f"{rows}/|{state.current.value}|{config.win_length}{flags}"


class BoundType(Enum):
    """How a stored score relates to the true value."""
    EXACT = 0   # Searched inside the window
    LOWER = 1   # True value >= score
    UPPER = 2   # True value <= score


@dataclass
class TTEntry:
    """
    One cached search result.

    Attributes:
        depth: Remaining search depth when this entry was stored
        score: Evaluation score (or bound), side-to-move perspective
        bound: Type of bound (EXACT/LOWER/UPPER)
        best_move: Best move found at this position
    """
    depth: int
    score: float
    bound: BoundType
    best_move: Optional[Move]


class TranspositionTable:
    """
    Dictionary-backed transposition table keyed by position_key().

    Once max_entries positions are stored, new positions are no longer
    added; existing entries can still be refreshed.
    """

    def __init__(self, max_entries: int = 1_000_000):
        self.max_entries = max_entries
        self.table: dict[str, TTEntry] = {}

        # Statistics
        self.hits = 0
        self.misses = 0
        self.stores = 0

    def __len__(self):
        return len(self.table)

    def probe(
        self,
        key: str,
        depth: int,
        alpha: float,
        beta: float
    ) -> Optional[tuple[float, Optional[Move]]]:
        """
        Look up a score usable at this depth and window.

        An entry is used only when it was searched at least as deep as
        requested and its bound settles the current window.

        Args:
            key: Position key
            depth: Current remaining search depth
            alpha: Current alpha bound
            beta: Current beta bound

        Returns:
            (score, best_move) if usable entry found, None otherwise
        """
        entry = self.table.get(key)

        if entry is None or entry.depth < depth:
            self.misses += 1
            return None

        if entry.bound == BoundType.EXACT:
            self.hits += 1
            return (entry.score, entry.best_move)
        elif entry.bound == BoundType.LOWER:
            # Lower bound: true value >= entry.score
            if entry.score >= beta:
                self.hits += 1
                return (entry.score, entry.best_move)
        elif entry.bound == BoundType.UPPER:
            # Upper bound: true value <= entry.score
            if entry.score <= alpha:
                self.hits += 1
                return (entry.score, entry.best_move)

        self.misses += 1
        return None

    def store(
        self,
        key: str,
        depth: int,
        score: float,
        bound: BoundType,
        best_move: Optional[Move]
    ):
        """
        Record a search result for a position.

        Replacement policy: a shallower result never replaces a deeper one,
        and at equal depth a bound never replaces an exact score.
        """
        existing = self.table.get(key)

        if existing is not None:
            if depth < existing.depth:
                return
            if depth == existing.depth and bound != BoundType.EXACT and existing.bound == BoundType.EXACT:
                return
        elif len(self.table) >= self.max_entries:
            return

        self.table[key] = TTEntry(depth=depth, score=score, bound=bound, best_move=best_move)
        self.stores += 1

    def get_best_move(self, key: str) -> Optional[Move]:
        """
        Retrieve best move without score checking.

        Used as an ordering hint when the entry is too shallow for a cutoff.
        """
        entry = self.table.get(key)
        return entry.best_move if entry is not None else None

    def clear(self):
        """Drop every entry and reset the counters."""
        self.table.clear()
        self._reset_stats()

    def _reset_stats(self):
        self.hits = 0
        self.misses = 0
        self.stores = 0

    def get_stats(self) -> dict:
        """
        Lookup and storage counters.

        Returns:
            Dictionary with hits, misses, hit rate, stores and size
        """
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'stores': self.stores,
            'size_entries': len(self.table),
        }

    def get_fill_rate(self) -> float:
        """Percentage of max_entries in use (0-100)."""
        return (len(self.table) / self.max_entries) * 100.0
