"""
Unit tests for config helpers and the Game adapter.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from ttt_twist.game.errors import InvalidConfigError
from ttt_twist.game.rules import apply_move, create_game
from ttt_twist.game.twist import TicTacToeTwist
from ttt_twist.game.types import Placement, VariantConfig
from ttt_twist.game.variants import CHAOS_BLOCKS, chaos_config, config_problem, default_config, validate_config


class TestValidateConfig:
    """Test config validation."""

    def test_default_is_classic(self):
        """3x3, three in a row, nothing switched on."""
        config = default_config()
        assert config == VariantConfig(board_size=3, win_length=3)
        assert not (config.gravity or config.wrap or config.misere)
        assert config.random_blocks == 0

    def test_valid_configs_pass(self):
        """Every supported size and length combination is accepted."""
        for size in range(3, 7):
            for win in (3, 4):
                if win > size:
                    continue
                config = VariantConfig(board_size=size, win_length=win)
                assert config_problem(config) is None
                assert validate_config(config) is config

    @pytest.mark.parametrize("config", [
        VariantConfig(board_size=3, win_length=4),
        VariantConfig(board_size=2, win_length=3),
        VariantConfig(board_size=7, win_length=4),
        VariantConfig(board_size=6, win_length=5),
        VariantConfig(board_size=4, win_length=3, random_blocks=-1),
    ])
    def test_invalid_configs_rejected(self, config):
        """Impossible games raise InvalidConfigError, a ValueError."""
        assert config_problem(config) is not None
        with pytest.raises(InvalidConfigError):
            validate_config(config)
        with pytest.raises(ValueError):
            validate_config(config)

    def test_config_is_frozen(self):
        """Configs cannot be changed after creation."""
        config = default_config()
        with pytest.raises(AttributeError):
            config.gravity = True


class TestChaosConfig:
    """Test random rule sets."""

    def test_always_some_rule_and_power(self):
        """At least one rule and one power, chaos_mode set."""
        for seed in range(30):
            config = chaos_config(5, 4, np.random.default_rng(seed))
            assert config.chaos_mode
            assert config.gravity or config.wrap or config.misere or config.random_blocks
            assert config.double_move or config.lane_shift or config.bomb
            assert config.random_blocks in (0, CHAOS_BLOCKS)
            assert config_problem(config) is None

    def test_small_board_uses_three(self):
        """3x3 chaos games are always three in a row."""
        config = chaos_config(3, 4, np.random.default_rng(0))
        assert config.win_length == 3

    def test_seeded(self):
        """The same seed rolls the same rules."""
        assert chaos_config(4, 4, np.random.default_rng(5)) == chaos_config(4, 4, np.random.default_rng(5))

    def test_varies(self):
        """Different seeds eventually roll different rules."""
        configs = {chaos_config(4, 3, np.random.default_rng(seed)) for seed in range(30)}
        assert len(configs) > 1


class TestTicTacToeTwist:
    """Test the Game adapter used by the search engine."""

    def test_value_from_movers_perspective(self):
        """The player who completes a line gets +1; under misere -1."""
        for misere, expected in ((False, 1), (True, -1)):
            game = TicTacToeTwist(VariantConfig(misere=misere))
            state = create_game(game.config)
            for move in [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)]:
                state = game.get_next_state(state, Placement(*move))
            assert game.get_value_and_terminated(state) == (expected, True)

    def test_in_progress(self):
        """Unfinished games are not terminal."""
        game = TicTacToeTwist(VariantConfig())
        state = apply_move(create_game(game.config), Placement(1, 1))
        assert game.get_value_and_terminated(state) == (0, False)

    def test_gravity_moves_deduplicated(self):
        """Cells in one gravity column collapse to the single landing cell."""
        game = TicTacToeTwist(VariantConfig(board_size=4, win_length=3, gravity=True))
        moves = game.get_valid_moves(create_game(game.config))
        assert moves == [Placement(3, c) for c in range(4)]

    def test_repr(self):
        """Readable summary of the rules."""
        game = TicTacToeTwist(VariantConfig(board_size=4, win_length=4, gravity=True, misere=True))
        assert repr(game) == "TicTacToeTwist(4x4, win=4, gravity+misere)"
