"""Per-trial pseudo-random source.

Every random decision of a trial (colour-role swap, probe intervals and
colours, marker switches, jitter draws) goes through one
:class:`RandomSource`. It wraps its own ``torch.Generator`` so that a seeded
trial is reproducible and never touches the global RNG state.
"""

from typing import Optional

import torch


class RandomSource:
    """Optionally seeded random source owned by a single trial.

    Args:
        seed: Seed for reproducible trials. None seeds from system entropy.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._generator = torch.Generator()
        if seed is None:
            self.seed = self._generator.seed()
        else:
            self.seed = int(seed)
            self._generator.manual_seed(self.seed)

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(torch.rand(1, generator=self._generator, dtype=torch.float64).item())

    def uniform(self, low: float, high: float) -> float:
        """Uniform draw in [low, high)."""
        return low + (high - low) * self.random()

    def randint(self, low: int, high: int) -> int:
        """Integer draw in [low, high); returns ``low`` for an empty range."""
        if high <= low:
            return int(low)
        return int(torch.randint(int(low), int(high), (1,), generator=self._generator).item())

    def chance(self, p: float = 0.5) -> bool:
        """True with probability ``p``."""
        return self.random() < p

    def choice(self, options):
        """Pick one element of a non-empty sequence."""
        return options[self.randint(0, len(options))]

    def reset_state(self) -> None:
        """Rewind the generator to its seed."""
        self._generator.manual_seed(self.seed)
