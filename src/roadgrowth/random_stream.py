"""Seeded random stream passed explicitly through the growth loop."""

import random


class RandomStream:
    """Reproducible source of uniform floats and biased booleans.

    Every draw is counted so callers can check how many values a build
    consumed.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.random = random.Random(seed)
        self.draw_count = 0

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        self.draw_count += 1
        return low + (high - low) * self.random.random()

    def gen_bool(self, probability: float) -> bool:
        """Bernoulli draw that is True with the given probability.

        Raises:
            ValueError: If probability is outside [0, 1]
        """
        if not (0.0 <= probability <= 1.0):
            raise ValueError(f"probability must be in [0, 1], got {probability}")
        self.draw_count += 1
        return self.random.random() < probability
