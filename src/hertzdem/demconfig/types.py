"""
Domain bound definitions.
"""

from dataclasses import dataclass
import numpy as np


@dataclass
class DomainBounds:
    """Simulation domain boundaries."""
    xmin: float
    xmax: float
    ymin: float
    ymax: float
    zmin: float
    zmax: float

    def __post_init__(self):
        if self.xmin >= self.xmax:
            raise ValueError(f"xmin ({self.xmin}) must be < xmax ({self.xmax})")
        if self.ymin >= self.ymax:
            raise ValueError(f"ymin ({self.ymin}) must be < ymax ({self.ymax})")
        if self.zmin >= self.zmax:
            raise ValueError(f"zmin ({self.zmin}) must be < zmax ({self.zmax})")

    def get_extended_bounds(self):
        return (
            np.array([self.xmin, self.ymin, self.zmin]),
            np.array([self.xmax, self.ymax, self.zmax])
        )
