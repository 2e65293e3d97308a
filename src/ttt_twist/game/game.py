from abc import ABC, abstractmethod


class Game(ABC):
    """
    Abstract Base Class for a two-player game consumed by the search engine.
    """

    @abstractmethod
    def get_next_state(self, state, move):
        """
        Returns the next state after the side to move plays the given move.
        """
        pass

    @abstractmethod
    def get_valid_moves(self, state):
        """
        Returns the list of moves worth searching in the current state.
        """
        pass

    @abstractmethod
    def get_value_and_terminated(self, state):
        """
        Returns the value of the state for the player who just moved
        (1 for win, 0 for draw, -1 for loss) and whether the game has terminated.
        """
        pass
