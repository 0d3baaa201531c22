"""
Seeded random source shared by all distortion stages.

One instance is created per run and handed to every stage in turn, so
the whole pipeline consumes a single ordered stream of draws.
"""

import random
import time

# Seed value meaning "derive from the wall clock".
TIME_SEED = -1


class GlitchRandom:
    """
    Deterministic random stream.

    Args:
        seed: Integer seed. ``None`` or ``TIME_SEED`` picks one from the
            current time; the chosen value is kept in ``self.seed``.
    """

    def __init__(self, seed: int | None = None):
        self._rng = random.Random()
        self.seed = 0
        self.reseed(seed)

    def reseed(self, seed: int | None = None) -> int:
        """Reinitialise the stream and return the effective seed."""
        if seed is None or seed == TIME_SEED:
            seed = time.time_ns()
        self.seed = int(seed)
        # int seeds go through abs(); the decimal string keeps the sign
        self._rng.seed(str(self.seed))
        return self.seed

    def uniform_int(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        return self._rng.randrange(n)

    def normal_float(self) -> float:
        """Standard normal deviate (mean 0, stddev 1)."""
        return self._rng.normalvariate(0.0, 1.0)

    def offset(self, stddev: float) -> int:
        """
        Normally distributed integer offset.

        The scaled sample is truncated toward zero, not rounded.
        """
        return int(self.normal_float() * stddev)
