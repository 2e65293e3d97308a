from ttt_twist.game.game import Game
from ttt_twist.game.rules import apply_move, legal_moves, resolve_placement
from ttt_twist.game.types import DRAW, GameState, Placement, VariantConfig


class TicTacToeTwist(Game):
    """
    Tic-Tac-Toe with variant rules, as seen by the search engine.

    Board: 3x3 up to 6x6
    Win condition: win_length in a row (horizontal, vertical, or diagonal),
        inverted under misere
    Actions: placements only; one-time powers are left to the players
    """

    def __init__(self, config: VariantConfig):
        self.config = config

    def __repr__(self):
        flags = [name for name in ('gravity', 'wrap', 'misere') if getattr(self.config, name)]
        suffix = f", {'+'.join(flags)}" if flags else ''
        return f"TicTacToeTwist({self.config.board_size}x{self.config.board_size}, win={self.config.win_length}{suffix})"

    def get_next_state(self, state: GameState, move) -> GameState:
        return apply_move(state, move)

    def get_valid_moves(self, state: GameState) -> list[Placement]:
        """
        Distinct placements for the side to move.

        Under gravity several requested cells land on the same final cell;
        each landing cell is returned once, as a placement on that cell.
        """
        moves = []
        seen = set()
        for move in legal_moves(state):
            final = resolve_placement(state, move)
            if final is None or final in seen:
                continue
            seen.add(final)
            moves.append(Placement(*final))
        return moves

    def get_value_and_terminated(self, state: GameState):
        """
        Returns game outcome from the perspective of the player who just moved.

        Returns:
            (value, terminated) where value is 1 if that player won, -1 if they
            lost (misere), 0 otherwise
        """
        winner = state.winner
        if winner is None:
            return 0, False
        if winner == DRAW:
            return 0, True
        mover = state.current.opponent
        return (1 if winner == mover else -1), True
