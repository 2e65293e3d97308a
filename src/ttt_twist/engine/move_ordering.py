"""
Move ordering for alpha-beta search.

Good move ordering is critical for alpha-beta pruning efficiency. The goal is to
search the best moves first to maximize beta cutoffs.

Ordering priority (high to low):
1. TT move (best move stored for this position by an earlier iteration)
2. Immediate wins (+inf)
3. Everything else by static evaluation of the child position, from the
   mover's perspective (draws score 0)
4. Immediate losses (-inf), e.g. completing a line under misere

Each child state is built once here and handed to the search with its score,
so the search never applies the same move twice.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from ttt_twist.engine.heuristics import evaluate
from ttt_twist.game.types import GameState, Move, Player


@dataclass
class ScoredMove:
    """A candidate move with its resulting position and one-ply score."""
    move: Move
    child: GameState
    score: float


class MoveOrdering:
    """
    One-ply static move ordering.

    Args:
        evaluator: (state, player) -> score, higher is better for player
    """

    def __init__(self, evaluator: Callable[[GameState, Player], float] = evaluate):
        self.evaluator = evaluator

    def order_moves(self, game, state: GameState, tt_move: Optional[Move] = None) -> list[ScoredMove]:
        """
        Order the side to move's candidate moves, best first.

        Args:
            game: Game instance providing valid moves and transitions
            state: Current state
            tt_move: Best move from transposition table (searched first)

        Returns:
            ScoredMove list; ties keep the game's move order
        """
        mover = state.current
        scored = []

        for move in game.get_valid_moves(state):
            child = game.get_next_state(state, move)
            value, terminated = game.get_value_and_terminated(child)
            if terminated:
                score = float('inf') if value > 0 else float('-inf') if value < 0 else 0.0
            else:
                score = self.evaluator(child, mover)
            scored.append(ScoredMove(move, child, score))

        scored.sort(key=lambda entry: entry.score, reverse=True)

        if tt_move is not None:
            scored.sort(key=lambda entry: entry.move != tt_move)

        return scored
