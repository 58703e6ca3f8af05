from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Guess:
    """
    One walker's full parameter vector at one instant.
    values[k] is the value of parameter k.
    """

    values: Tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, idx):
        return self.values[idx]

    def as_array(self) -> np.ndarray:
        return np.array(self.values, dtype=np.float64)
