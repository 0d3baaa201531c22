"""Tests for the seeded random source."""

import pytest

from tapeglitch.core.rng import TIME_SEED, GlitchRandom


def _draws(rng: GlitchRandom, n: int = 50):
    return [(rng.uniform_int(100), rng.normal_float()) for _ in range(n)]


class TestGlitchRandom:
    def test_same_seed_same_stream(self):
        assert _draws(GlitchRandom(7)) == _draws(GlitchRandom(7))

    def test_different_seed_different_stream(self):
        assert _draws(GlitchRandom(7)) != _draws(GlitchRandom(8))

    def test_negative_seed_differs_from_positive(self):
        assert _draws(GlitchRandom(5)) != _draws(GlitchRandom(-5))
        assert _draws(GlitchRandom(-5)) == _draws(GlitchRandom(-5))

    def test_reseed_restarts_stream(self):
        rng = GlitchRandom(3)
        first = _draws(rng)
        rng.reseed(3)
        assert _draws(rng) == first

    @pytest.mark.parametrize("seed", [None, TIME_SEED])
    def test_time_seed_is_reported(self, seed):
        rng = GlitchRandom(seed)
        assert rng.seed != TIME_SEED
        replay = GlitchRandom(rng.seed)
        assert _draws(rng) == _draws(replay)

    def test_uniform_int_range(self):
        rng = GlitchRandom(1)
        values = {rng.uniform_int(5) for _ in range(500)}
        assert values == {0, 1, 2, 3, 4}
        assert all(rng.uniform_int(1) == 0 for _ in range(20))

    def test_normal_float_roughly_standard(self):
        rng = GlitchRandom(11)
        samples = [rng.normal_float() for _ in range(5000)]
        mean = sum(samples) / len(samples)
        var = sum((s - mean) ** 2 for s in samples) / len(samples)
        assert abs(mean) < 0.1
        assert 0.85 < var < 1.15


class TestOffset:
    @pytest.mark.parametrize(
        "normal, stddev, expected",
        [
            (0.9, 1.0, 0),
            (-0.9, 1.0, 0),
            (2.7, 1.0, 2),
            (-2.7, 1.0, -2),
            (0.5, 10.0, 5),
            (-0.55, 10.0, -5),
        ],
    )
    def test_truncates_toward_zero(self, fixed_rng, normal, stddev, expected):
        assert fixed_rng(normal=normal).offset(stddev) == expected

    def test_zero_stddev_gives_zero(self):
        rng = GlitchRandom(5)
        assert all(rng.offset(0.0) == 0 for _ in range(100))
