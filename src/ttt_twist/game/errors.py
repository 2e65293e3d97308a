"""Exceptions raised by the rules engine."""


class IllegalMoveError(ValueError):
    """Raised by apply_move when a move breaks the rules of the current game."""


class InvalidConfigError(ValueError):
    """Raised when a VariantConfig describes an impossible game."""
