"""
Host-side particle groups.

A node list is one collection of particles sharing the same arrays. The
contact core addresses a particle by (node list index, local index).
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


def _as_vectors(value, n: int, label: str) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.size == 0 and n == 0:
        return np.zeros((0, arr.shape[-1] if arr.ndim == 2 else 3))
    if arr.ndim != 2 or arr.shape[0] != n:
        raise ValueError(f"{label} must have shape ({n}, dim), got {arr.shape}")
    if not (1 <= arr.shape[1] <= 3):
        raise ValueError(f"{label} dimension must be 1, 2 or 3, got {arr.shape[1]}")
    return np.ascontiguousarray(arr)


@dataclass
class NodeList:
    """A group of spherical particles."""
    name: str
    mass: np.ndarray
    position: np.ndarray
    velocity: np.ndarray
    radius: np.ndarray
    omega: Optional[np.ndarray] = None      # spin state, zero if not given

    def __post_init__(self):
        self.mass = np.ascontiguousarray(np.asarray(self.mass, dtype=np.float64).reshape(-1))
        n = self.mass.shape[0]
        self.radius = np.ascontiguousarray(np.asarray(self.radius, dtype=np.float64).reshape(-1))
        if self.radius.shape[0] != n:
            raise ValueError(f"radius must have {n} entries, got {self.radius.shape[0]}")

        self.position = _as_vectors(self.position, n, "position")
        self.velocity = _as_vectors(self.velocity, n, "velocity")
        if self.position.shape[1] != self.velocity.shape[1]:
            raise ValueError(
                f"position and velocity dimensions differ: {self.position.shape[1]} != {self.velocity.shape[1]}")

        if self.omega is None:
            self.omega = np.zeros((n, 3))
        else:
            self.omega = _as_vectors(self.omega, n, "omega")

    @property
    def size(self) -> int:
        return self.mass.shape[0]

    @property
    def dimension(self) -> int:
        return self.position.shape[1]
