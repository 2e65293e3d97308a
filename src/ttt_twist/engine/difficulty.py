"""Named difficulty levels mapped to search depth."""

import logging
from enum import Enum
from typing import Optional

from ttt_twist.config import DIFFICULTY_CONFIG
from ttt_twist.engine.alphabeta import best_move
from ttt_twist.game.types import GameState, Move

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    CHILL = 'chill'
    BALANCED = 'balanced'
    SHARP = 'sharp'


def difficulty_depth(difficulty: Difficulty, board_size: int) -> int:
    """Search depth for a difficulty; sharp looks further ahead on 3x3."""
    preset = DIFFICULTY_CONFIG[Difficulty(difficulty).value]
    if board_size == 3 and 'depth_3x3' in preset:
        return preset['depth_3x3']
    return preset['depth']


def choose_move(
    state: GameState,
    difficulty: Difficulty = Difficulty.BALANCED,
    max_millis: Optional[int] = None
) -> Optional[Move]:
    """Engine move for the side to move at the given difficulty."""
    depth = difficulty_depth(difficulty, state.size)
    logger.debug("Choosing %s move at depth %d for %s", Difficulty(difficulty).value, depth, state.current.value)
    return best_move(state, state.current, depth=depth, max_millis=max_millis)
