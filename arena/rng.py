import numpy as np

class DRNG:
    """Deterministic Random Number Generator wrapper."""

    def __init__(self, seed: int):
        self.g = np.random.Generator(np.random.PCG64(seed))

    def integer(self, low: int, high: int) -> int:
        """Return a random int in [low, high]."""
        return int(self.g.integers(low, high, endpoint=True))

    def heading(self, speed: float) -> tuple[int, int]:
        """Random velocity vector of the given speed, rounded to ints."""
        angle = self.g.uniform(0.0, 2.0 * np.pi)
        return (int(round(speed * np.cos(angle))), int(round(speed * np.sin(angle))))
