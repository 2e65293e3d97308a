# Search engine module

from .alphabeta import AlphaBetaEngine, SearchResult, best_move, SCORE_WIN, SCORE_DRAW
from .difficulty import Difficulty, choose_move
from .heuristics import evaluate
from .move_ordering import MoveOrdering
from .transposition_table import BoundType, TranspositionTable, position_key

__all__ = [
    'AlphaBetaEngine', 'SearchResult', 'best_move', 'SCORE_WIN', 'SCORE_DRAW',
    'Difficulty', 'choose_move',
    'evaluate',
    'MoveOrdering',
    'BoundType', 'TranspositionTable', 'position_key',
]
