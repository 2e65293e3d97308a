"""
Configuration for the Tic-Tac-Toe Twist engine.

The heuristic constants are tuning parameters, not derived values. They are
tuned so that 3x3 classic play from the opening never loses.
"""


# Search Configuration
SEARCH_CONFIG = {
    'default_depth_3x3': 10,            # Near-exhaustive on 3x3 (9 empty cells)
    'default_depth': 5,                 # 4x4 .. 6x6, branching factor up to 36
    'tt_max_entries': 1_000_000,        # Stop storing new positions past this size
}


# Static Evaluation Configuration
HEURISTIC_CONFIG = {
    'win_bonus': 10_000,                # Completed window, dominates every other term
    'density_base': 4,                  # Window score grows as density_base ** marks
    'near_win_bonus': 50,               # Exactly one empty slot left in the window
    'open_end_bonus': 10,               # Both cells beyond the window are empty
    'center_weight': 3,                 # Per mark, scaled by closeness to the center
}


# Difficulty presets (search depth per level)
DIFFICULTY_CONFIG = {
    'chill': {'depth': 2},
    'balanced': {'depth': 4},
    'sharp': {'depth': 5, 'depth_3x3': 8},
}
