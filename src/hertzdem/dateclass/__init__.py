"""
Core data structures for the Hertzian DEM contact core.

This module aggregates the Taichi records consumed by the kernels:

- Particles (make_grain_type): mass, radius, position, velocity and spin.
- Contact pairs: (node list, node) identifiers of two candidate particles.
"""

from .contact import ContactPair
from .grain import make_grain_type

__all__ = [
    "ContactPair",
    "make_grain_type",
]
