"""Unit tests for the per-trial random source."""

import torch

from rotorforge.core.random_source import RandomSource


class TestRandomSource:
    """Test RandomSource reproducibility and ranges."""

    def test_same_seed_same_sequence(self):
        """Two sources with one seed draw identical sequences."""
        a, b = RandomSource(42), RandomSource(42)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]
        assert [a.randint(0, 100) for _ in range(5)] == [b.randint(0, 100) for _ in range(5)]

    def test_does_not_touch_global_rng(self):
        """Draws leave the global torch generator untouched."""
        torch.manual_seed(0)
        expected = torch.rand(3)
        torch.manual_seed(0)
        source = RandomSource(1)
        for _ in range(10):
            source.random()
        assert torch.equal(torch.rand(3), expected)

    def test_unseeded_reports_seed(self):
        """An unseeded source records the seed it drew, which replays it."""
        source = RandomSource()
        replay = RandomSource(source.seed)
        assert source.random() == replay.random()

    def test_ranges(self):
        """random, uniform and randint stay within their bounds."""
        source = RandomSource(5)
        for _ in range(200):
            assert 0.0 <= source.random() < 1.0
            assert -2.0 <= source.uniform(-2.0, 2.0) < 2.0
            assert 1500 <= source.randint(1500, 3500) < 3500

    def test_randint_empty_range(self):
        """An empty integer range returns its lower bound."""
        source = RandomSource(5)
        assert source.randint(7, 7) == 7

    def test_choice_and_reset(self):
        """reset_state rewinds to the seed."""
        source = RandomSource(9)
        first = [source.choice(["a", "b", "c"]) for _ in range(6)]
        source.reset_state()
        assert [source.choice(["a", "b", "c"]) for _ in range(6)] == first

    def test_chance_extremes(self):
        """p=0 never fires, p=1 always does."""
        source = RandomSource(3)
        assert not any(source.chance(0.0) for _ in range(50))
        assert all(source.chance(1.0) for _ in range(50))
