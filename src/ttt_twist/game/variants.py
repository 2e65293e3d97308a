"""
Variant configuration helpers: defaults, validation and chaos mode.
"""

from typing import Optional

import numpy as np

from ttt_twist.game.errors import InvalidConfigError
from ttt_twist.game.types import VariantConfig


BOARD_SIZES = (3, 4, 5, 6)
WIN_LENGTHS = (3, 4)

# Chaos mode draws a non-empty subset from each group
CHAOS_RULES = ('gravity', 'wrap', 'misere', 'random_blocks')
CHAOS_POWERS = ('lane_shift', 'double_move', 'bomb')
CHAOS_BLOCKS = 3


def default_config() -> VariantConfig:
    """Classic 3x3 tic-tac-toe, no variants."""
    return VariantConfig(board_size=3, win_length=3)


def config_problem(config: VariantConfig) -> Optional[str]:
    """Returns a description of what is wrong with the config, or None if it is playable."""
    if config.board_size not in BOARD_SIZES:
        return f"board_size must be one of {BOARD_SIZES}, got {config.board_size}"
    if config.win_length not in WIN_LENGTHS:
        return f"win_length must be one of {WIN_LENGTHS}, got {config.win_length}"
    if config.win_length > config.board_size:
        return "win_length cannot exceed board_size"
    if config.random_blocks < 0:
        return f"random_blocks cannot be negative, got {config.random_blocks}"
    return None


def validate_config(config: VariantConfig) -> VariantConfig:
    """
    Validate a config at construction time.

    Returns:
        The same config, for chaining

    Raises:
        InvalidConfigError: if the config describes an impossible game
    """
    problem = config_problem(config)
    if problem is not None:
        raise InvalidConfigError(problem)
    return config


def _pick_subset(items, rng: np.random.Generator, min_count: int = 1) -> set:
    count = int(rng.integers(min_count, len(items) + 1))
    return set(rng.permutation(len(items))[:count].tolist())


def chaos_config(
    board_size: int = 3,
    win_length: int = 3,
    rng: Optional[np.random.Generator] = None
) -> VariantConfig:
    """
    Roll a random rule set.

    At least one rule (gravity, wrap, misere, random blocks) and at least one
    power are switched on. 3x3 boards always play to 3 in a row.

    Args:
        board_size: Board edge length
        win_length: Requested line length (forced to 3 on 3x3)
        rng: Random generator (default: fresh generator)
    """
    rng = rng if rng is not None else np.random.default_rng()
    win_length = 3 if board_size == 3 else win_length

    rules = {CHAOS_RULES[i] for i in _pick_subset(CHAOS_RULES, rng)}
    powers = {CHAOS_POWERS[i] for i in _pick_subset(CHAOS_POWERS, rng)}

    return validate_config(VariantConfig(
        board_size=board_size,
        win_length=win_length,
        gravity='gravity' in rules,
        wrap='wrap' in rules,
        misere='misere' in rules,
        random_blocks=CHAOS_BLOCKS if 'random_blocks' in rules else 0,
        lane_shift='lane_shift' in powers,
        double_move='double_move' in powers,
        bomb='bomb' in powers,
        chaos_mode=True,
    ))
