"""
Unit tests for the transposition table and position keys.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from ttt_twist.engine.transposition_table import BoundType, TranspositionTable, position_key
from ttt_twist.game.rules import apply_move, create_game
from ttt_twist.game.types import Placement, VariantConfig


class TestPositionKey:
    """Test canonical position keys."""

    def test_empty_classic_key(self):
        """Rows, side to move, win length and variant flags."""
        state = create_game(VariantConfig())
        assert position_key(state) == ".../.../.../|X|3------"

    def test_key_tracks_moves(self):
        """Different boards and sides to move give different keys."""
        state = create_game(VariantConfig())
        after = apply_move(state, Placement(1, 1))
        assert position_key(after) == ".../.X./.../|O|3------"
        assert position_key(after) != position_key(state)

    def test_transposition_same_key(self):
        """The same position reached in a different order shares a key."""
        start = create_game(VariantConfig())
        a = start
        for move in [(0, 0), (1, 1), (2, 2)]:
            a = apply_move(a, Placement(*move))
        b = start
        for move in [(2, 2), (1, 1), (0, 0)]:
            b = apply_move(b, Placement(*move))
        assert position_key(a) == position_key(b)

    def test_variant_flags_in_key(self):
        """Rule changes produce different keys for the same board."""
        keys = {
            position_key(create_game(config))
            for config in [
                VariantConfig(),
                VariantConfig(wrap=True),
                VariantConfig(gravity=True),
                VariantConfig(misere=True),
                VariantConfig(double_move=True),
                VariantConfig(lane_shift=True),
                VariantConfig(bomb=True),
            ]
        }
        assert len(keys) == 7


class TestTranspositionTable:
    """Test transposition table functionality."""

    def test_store_and_probe(self):
        """Basic store and probe should work."""
        tt = TranspositionTable()
        tt.store("k", depth=5, score=100.0, bound=BoundType.EXACT, best_move=Placement(0, 1))

        result = tt.probe("k", depth=3, alpha=-1000, beta=1000)
        assert result is not None
        assert result[0] == 100.0
        assert result[1] == Placement(0, 1)

    def test_depth_requirement(self):
        """Should not return entry if stored depth is too shallow."""
        tt = TranspositionTable()
        tt.store("k", depth=3, score=50.0, bound=BoundType.EXACT, best_move=None)
        assert tt.probe("k", depth=5, alpha=-1000, beta=1000) is None

    def test_bound_types(self):
        """Different bound types should respect alpha-beta window."""
        tt = TranspositionTable()

        # Lower bound: usable only when it reaches beta
        tt.store("lower", depth=5, score=100.0, bound=BoundType.LOWER, best_move=None)
        assert tt.probe("lower", depth=3, alpha=-1000, beta=50) is not None
        assert tt.probe("lower", depth=3, alpha=-1000, beta=200) is None

        # Upper bound: usable only when at or below alpha
        tt.store("upper", depth=5, score=-100.0, bound=BoundType.UPPER, best_move=None)
        assert tt.probe("upper", depth=3, alpha=-50, beta=1000) is not None
        assert tt.probe("upper", depth=3, alpha=-200, beta=1000) is None

    def test_deeper_entry_kept(self):
        """A shallower search never overwrites a deeper one."""
        tt = TranspositionTable()
        tt.store("k", depth=6, score=10.0, bound=BoundType.EXACT, best_move=Placement(1, 1))
        tt.store("k", depth=2, score=-5.0, bound=BoundType.EXACT, best_move=Placement(0, 0))
        assert tt.probe("k", depth=6, alpha=-1000, beta=1000) == (10.0, Placement(1, 1))

        tt.store("k", depth=7, score=3.0, bound=BoundType.LOWER, best_move=Placement(2, 2))
        assert tt.get_best_move("k") == Placement(2, 2)

    def test_capacity_limit(self):
        """New keys are dropped once the table is full; existing keys still update."""
        tt = TranspositionTable(max_entries=2)
        tt.store("a", 1, 1.0, BoundType.EXACT, None)
        tt.store("b", 1, 2.0, BoundType.EXACT, None)
        tt.store("c", 1, 3.0, BoundType.EXACT, None)
        assert len(tt) == 2
        assert tt.get_best_move("c") is None
        tt.store("a", 2, 4.0, BoundType.EXACT, Placement(0, 0))
        assert tt.get_best_move("a") == Placement(0, 0)
        assert tt.get_fill_rate() == 100.0

    def test_stats_and_clear(self):
        """Hits, misses and stores are counted; clear resets everything."""
        tt = TranspositionTable()
        tt.store("k", 3, 1.0, BoundType.EXACT, None)
        tt.probe("k", 1, -10, 10)
        tt.probe("missing", 1, -10, 10)
        stats = tt.get_stats()
        assert stats['hits'] == 1
        assert stats['misses'] == 1
        assert stats['stores'] == 1
        assert stats['hit_rate'] == 0.5
        assert stats['size_entries'] == 1

        tt.clear()
        assert len(tt) == 0
        assert tt.get_stats()['stores'] == 0
