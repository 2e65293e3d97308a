"""
Unit tests for JSON encoding of configs, moves and states.
"""

import json

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from ttt_twist.game.rules import apply_move, create_game
from ttt_twist.game.serialization import (
    board_from_list,
    config_from_dict,
    config_to_dict,
    dumps,
    loads,
    move_from_dict,
    move_to_dict,
    state_to_dict,
)
from ttt_twist.game.types import (
    DRAW, Axis, Bomb, Cell, DoubleMove, LaneShift, Placement, Player, Power, VariantConfig,
)


POWERS = VariantConfig(board_size=4, win_length=3, double_move=True, lane_shift=True, bomb=True)


class TestConfigEncoding:
    """Test camelCase config payloads."""

    def test_wire_keys(self):
        """Field names follow the client's camelCase keys."""
        data = config_to_dict(VariantConfig(board_size=5, win_length=4, random_blocks=2, lane_shift=True))
        assert data['boardSize'] == 5
        assert data['winLength'] == 4
        assert data['randomBlocks'] == 2
        assert data['laneShift'] is True
        assert data['chaosMode'] is False

    def test_missing_flags_default_off(self):
        """Only size and length are required."""
        config = config_from_dict({'boardSize': 4, 'winLength': 3, 'gravity': True})
        assert config == VariantConfig(board_size=4, win_length=3, gravity=True)

    def test_missing_size_rejected(self):
        """Malformed payloads raise ValueError."""
        with pytest.raises(ValueError):
            config_from_dict({'winLength': 3})


class TestMoveEncoding:
    """Test move payloads."""

    def test_placement(self):
        """Plain placements use r/c."""
        assert move_to_dict(Placement(1, 2, Player.X)) == {'r': 1, 'c': 2, 'player': 'X'}
        assert move_from_dict({'r': 1, 'c': 2}) == Placement(1, 2)

    def test_double_move_uses_extra(self):
        """The first placement travels under 'extra', the second under r/c."""
        data = move_to_dict(DoubleMove((0, 0), (2, 3), Player.O))
        assert data == {'power': 'doubleMove', 'r': 2, 'c': 3, 'extra': {'r': 0, 'c': 0}, 'player': 'O'}
        assert move_from_dict(data) == DoubleMove((0, 0), (2, 3), Player.O)

    def test_lane_shift(self):
        """Shift parameters are nested."""
        data = move_to_dict(LaneShift(Axis.COLUMN, 1, -1))
        assert data == {'power': 'laneShift', 'shift': {'axis': 'column', 'index': 1, 'direction': -1}}
        assert move_from_dict(data) == LaneShift(Axis.COLUMN, 1, -1)

    def test_bomb(self):
        """Bombs carry the target cell."""
        assert move_from_dict({'power': 'bomb', 'r': 0, 'c': 3, 'player': 'X'}) == Bomb(0, 3, Player.X)

    @pytest.mark.parametrize("payload", [
        {'r': 1},
        {'power': 'teleport', 'r': 0, 'c': 0},
        {'power': 'laneShift', 'shift': {'axis': 'diagonal', 'index': 0, 'direction': 1}},
        {'power': 'doubleMove', 'r': 0, 'c': 0},
        {'r': 0, 'c': 0, 'player': 'Z'},
    ])
    def test_malformed_moves(self, payload):
        """Bad payloads surface as ValueError."""
        with pytest.raises(ValueError):
            move_from_dict(payload)


class TestStateEncoding:
    """Test full game states."""

    def test_cell_values(self):
        """Cells encode as null, X, O, B and F."""
        state = apply_move(create_game(VariantConfig(board_size=4, win_length=3, bomb=True)), Bomb(0, 0))
        board = state_to_dict(state)['board']
        assert board[0][0] == 'F'
        assert board[0][1] is None

        grid = board_from_list([[None, 'X', 'O'], ['B', 'F', None], [None, None, None]])
        assert grid[1, 0] == Cell.BLOCKED
        assert grid[1, 1] == Cell.BOMBED
        assert grid[0, 1] == Cell.X

    def test_state_round_trip(self):
        """loads(dumps(state)) rebuilds an equivalent state."""
        state = create_game(POWERS)
        for move in [Placement(0, 0), DoubleMove((2, 2), (0, 3)), LaneShift(Axis.ROW, 0, 1), Bomb(3, 3)]:
            state = apply_move(state, move)

        text = dumps(state)
        json.loads(text)  # plain JSON
        restored = loads(text)

        assert np.array_equal(restored.board, state.board)
        assert restored.current is state.current
        assert restored.config == state.config
        assert restored.moves == state.moves
        assert restored.last_move == state.last_move
        assert restored.powers == state.powers
        assert restored.powers.has_used(Power.DOUBLE_MOVE, Player.O)
        assert restored.winner is None

    def test_winner_encoding(self):
        """Winners are 'X', 'O' or 'Draw'."""
        state = create_game(VariantConfig())
        for move in [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]:
            state = apply_move(state, Placement(*move))
        data = state_to_dict(state)
        assert data['winner'] == 'X'
        assert loads(dumps(state)).winner is Player.X

        data['winner'] = DRAW
        assert loads(json.dumps(data)).winner == DRAW

    def test_powers_flags(self):
        """Power usage is exposed as per-player flags."""
        state = apply_move(create_game(POWERS), Bomb(1, 1))
        flags = state_to_dict(state)['powers']
        assert flags['bomb'] == {'X': True, 'O': False}
        assert flags['doubleMove'] == {'X': False, 'O': False}

    def test_bad_board_rejected(self):
        """Unknown cells and ragged grids raise ValueError."""
        with pytest.raises(ValueError):
            board_from_list([['Q', None], [None, None]])
        with pytest.raises(ValueError):
            board_from_list([[None, None], [None]])

    def test_missing_fields_rejected(self):
        """A state without a board cannot be loaded."""
        with pytest.raises(ValueError):
            loads(json.dumps({'current': 'X', 'config': {'boardSize': 3, 'winLength': 3}}))
