"""
Parallel execution support for the DEM contact core.

Provides the Taichi runtime initialisation, the backend-parametrised loop
layout and the per-worker partial buffers used for conflict-free
accumulation and minimum reductions.
"""

from .runtime import Backend, Precision, init, get_backend, get_precision, is_initialized
from .backend import LoopBackend, default_workers
from .reduction import PartialAccumulator, MinReduction, FaultIndex

__all__ = [
    "Backend",
    "Precision",
    "init",
    "get_backend",
    "get_precision",
    "is_initialized",
    "LoopBackend",
    "default_workers",
    "PartialAccumulator",
    "MinReduction",
    "FaultIndex",
]
