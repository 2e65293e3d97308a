"""
Alpha-beta negamax search engine for Tic-Tac-Toe Twist.

Negamax: each node maximizes its own score and negates the child scores.
Depths 1, 2, 3... are searched in turn; each iteration reorders the root so
the previous best move goes first, and an iteration cut short by the deadline
is thrown away.

Sketch:

    def negamax(state, depth, alpha, beta):
        if cached := tt.probe(key(state), depth, alpha, beta):
            return cached

        best_score = -infinity
        for move, child in ordered_moves:
            if child is terminal:
                score = +/-(WIN - ply) or 0 for a draw
            elif depth == 1:
                score = static_eval(child, mover)
            else:
                score = -negamax(child, depth-1, -beta, -alpha)

            best_score = max(best_score, score)
            alpha = max(alpha, score)

            if alpha >= beta:
                break  # Beta cutoff

        tt.store(key(state), depth, best_score, bound, best_move)
        return best_score

Scores are always from the perspective of the side to move at the node.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ttt_twist.config import SEARCH_CONFIG
from ttt_twist.engine.heuristics import evaluate
from ttt_twist.engine.move_ordering import MoveOrdering, ScoredMove
from ttt_twist.engine.transposition_table import BoundType, TranspositionTable, position_key
from ttt_twist.game.twist import TicTacToeTwist
from ttt_twist.game.types import Cell, GameState, Move, Player

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Result of alpha-beta search."""
    best_move: Optional[Move]
    score: float
    depth_reached: int
    nodes_searched: int
    time_ms: int
    timed_out: bool
    tt_stats: dict


# Sentinel values for win/loss/draw
SCORE_WIN = 1_000_000
SCORE_LOSS = -1_000_000
SCORE_DRAW = 0
SCORE_INF = 10_000_000


def default_depth(board_size: int) -> int:
    """Near-exhaustive depth on 3x3, shallower on larger boards."""
    if board_size == 3:
        return SEARCH_CONFIG['default_depth_3x3']
    return SEARCH_CONFIG['default_depth']


class AlphaBetaEngine:
    """
    Alpha-beta negamax search engine with iterative deepening.

    Args:
        game: TicTacToeTwist instance for the variant being played
        evaluator: Leaf evaluation function (state, player) -> score
        tt_max_entries: Transposition table capacity
    """

    def __init__(
        self,
        game: TicTacToeTwist,
        evaluator: Callable[[GameState, Player], float] = evaluate,
        tt_max_entries: int = SEARCH_CONFIG['tt_max_entries']
    ):
        self.game = game
        self.evaluator = evaluator
        self.tt = TranspositionTable(max_entries=tt_max_entries)
        self.move_ordering = MoveOrdering(evaluator)

        # Search statistics
        self.nodes_searched = 0
        self.deadline: Optional[float] = None

    def search(
        self,
        state: GameState,
        max_depth: Optional[int] = None,
        time_limit_ms: Optional[int] = None
    ) -> SearchResult:
        """
        Main search entry point with iterative deepening.

        Strategy:
        - Search depth 1, then 2, then 3... up to max_depth
        - Always keep best move from last completed depth
        - If time runs out before depth 1 completes, fall back to the best
          move of the statically ordered root list

        Args:
            state: Position to search, for the side to move
            max_depth: Target depth (default depends on board size); capped
                at the number of empty cells
            time_limit_ms: Wall-clock budget, None for depth-only search

        Returns:
            SearchResult with best move, score, statistics
        """
        if state.config != self.game.config:
            raise ValueError(f"State rules do not match {self.game!r}")

        start_time = time.monotonic()
        self.deadline = start_time + time_limit_ms / 1000 if time_limit_ms is not None else None
        self.nodes_searched = 0

        root_moves = self.move_ordering.order_moves(self.game, state)
        if not root_moves:
            return SearchResult(
                best_move=None,
                score=SCORE_DRAW,
                depth_reached=0,
                nodes_searched=0,
                time_ms=0,
                timed_out=False,
                tt_stats=self.tt.get_stats()
            )

        target_depth = max_depth if max_depth is not None else default_depth(state.size)
        empties = int(np.count_nonzero(state.board == Cell.EMPTY))
        target_depth = max(1, min(target_depth, empties))

        # Fallback: best move by static ordering
        best_move = root_moves[0].move
        best_score = root_moves[0].score
        depth_reached = 0
        timed_out = False

        for depth in range(1, target_depth + 1):
            try:
                score, move = self._search_root(state, root_moves, depth)
            except TimeoutError:
                timed_out = True
                logger.debug("Search timed out during depth %d, keeping depth %d result", depth, depth_reached)
                break

            best_move, best_score, depth_reached = move, score, depth
            logger.debug(
                "depth %d score %s move %r nodes %d time %dms",
                depth, score, move, self.nodes_searched, int((time.monotonic() - start_time) * 1000)
            )

            # Search the current best move first at the next depth
            root_moves.sort(key=lambda entry: entry.move != move)

            # Stop if we found a forced win/loss
            if abs(score) >= SCORE_WIN - 100:
                break

        return SearchResult(
            best_move=best_move,
            score=best_score,
            depth_reached=depth_reached,
            nodes_searched=self.nodes_searched,
            time_ms=int((time.monotonic() - start_time) * 1000),
            timed_out=timed_out,
            tt_stats=self.tt.get_stats()
        )

    def _search_root(self, state: GameState, root_moves: list[ScoredMove], depth: int):
        """
        Root node search (full window, every move searched).

        Returns:
            (score, best_move)
        """
        alpha = -SCORE_INF
        beta = SCORE_INF
        best_score = -SCORE_INF
        best_move = None

        for scored in root_moves:
            self._check_time()
            score = self._score_child(scored, depth, alpha, beta, ply=1)
            if score > best_score:
                best_score = score
                best_move = scored.move
            alpha = max(alpha, score)

        self.tt.store(position_key(state), depth, best_score, BoundType.EXACT, best_move)
        return best_score, best_move

    def _score_child(self, scored: ScoredMove, depth: int, alpha: float, beta: float, ply: int) -> float:
        """Score of a child position from the perspective of the player who moved into it."""
        value, terminated = self.game.get_value_and_terminated(scored.child)
        if terminated:
            # Prefer faster wins and slower losses
            return value * (SCORE_WIN - ply)
        if depth <= 1:
            # Leaf: the ordering already evaluated this child for the mover
            return scored.score
        return -self._negamax(scored.child, depth - 1, -beta, -alpha, ply)

    def _negamax(self, state: GameState, depth: int, alpha: float, beta: float, ply: int) -> float:
        """
        Negamax alpha-beta search of a non-terminal position.

        Args:
            state: Board state (side to move is state.current)
            depth: Remaining depth (>= 1)
            alpha: Alpha bound
            beta: Beta bound
            ply: Ply from root

        Returns:
            Score from current player's perspective
        """
        self.nodes_searched += 1
        self._check_time()

        # Probe transposition table
        key = position_key(state)
        tt_result = self.tt.probe(key, depth, alpha, beta)
        if tt_result is not None:
            return tt_result[0]

        ordered_moves = self.move_ordering.order_moves(self.game, state, tt_move=self.tt.get_best_move(key))
        if not ordered_moves:
            return self.evaluator(state, state.current)

        best_score = -SCORE_INF
        best_move = None
        original_alpha = alpha

        for scored in ordered_moves:
            score = self._score_child(scored, depth, alpha, beta, ply + 1)

            if score > best_score:
                best_score = score
                best_move = scored.move

            alpha = max(alpha, score)

            # Beta cutoff
            if alpha >= beta:
                break

        # Determine bound type for TT
        if best_score <= original_alpha:
            bound = BoundType.UPPER  # All moves failed low
        elif best_score >= beta:
            bound = BoundType.LOWER  # We failed high
        else:
            bound = BoundType.EXACT  # PV node

        self.tt.store(key, depth, best_score, bound, best_move)

        return best_score

    def _check_time(self):
        """Raise TimeoutError once the deadline has passed."""
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise TimeoutError("Time limit exceeded")

    def clear_tt(self):
        """Clear transposition table."""
        self.tt.clear()

    def get_stats(self) -> dict:
        """Get search statistics."""
        return {
            'nodes_searched': self.nodes_searched,
            'tt_stats': self.tt.get_stats(),
            'tt_fill_rate': self.tt.get_fill_rate(),
        }


def best_move(
    state: GameState,
    for_player: Player,
    depth: Optional[int] = None,
    max_millis: Optional[int] = None
) -> Optional[Move]:
    """
    Best placement for the side to move.

    Args:
        state: Current position
        for_player: Player to search for; must be the side to move
        depth: Search depth (default: 10 on 3x3, 5 otherwise)
        max_millis: Optional wall-clock budget

    Returns:
        The chosen placement, or None when there are no legal moves

    Raises:
        ValueError: for_player is not on turn. The search only ever plays
            for the side to move, so a mismatch is a caller error rather
            than a position without moves.
    """
    if for_player != state.current:
        raise ValueError(f"Cannot search for {Player(for_player).value}: {state.current.value} is to move")
    engine = AlphaBetaEngine(TicTacToeTwist(state.config))
    return engine.search(state, max_depth=depth, time_limit_ms=max_millis).best_move
