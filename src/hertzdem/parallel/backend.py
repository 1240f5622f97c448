"""
Backend-parametrised loops for the DEM contact core.

Every loop of the core is split into `num_workers` work items. Work item w
owns the contiguous chunk [w * chunk, min((w + 1) * chunk, n)) of the
input and runs it serially; the work items themselves run in parallel on
the arch chosen at ti.init. A backend therefore only decides how many
workers there are and where they run:

- serial: a single worker, every loop runs in order on one CPU thread
- cpu: one worker per hardware thread
- cuda / vulkan / metal: many workers offloaded to the accelerator
"""

import os
from typing import Optional

from .runtime import Backend, backend_to_arch, get_backend

# Work items launched on accelerators; each owns one private accumulator row
ACCELERATOR_WORKERS = 1024

# Upper bound on the per-worker accumulator rows (3 doubles per particle per worker)
DEFAULT_PARTIAL_BYTES = 256 * 1024 * 1024
PARTIAL_BYTES_PER_PARTICLE = 3 * 8


def default_workers(backend: Backend) -> int:
    if backend == Backend.AUTO:
        backend = get_backend() or Backend.CPU
    if backend == Backend.SERIAL:
        return 1
    if backend == Backend.CPU:
        return os.cpu_count() or 1
    return ACCELERATOR_WORKERS


class LoopBackend:
    """Worker layout used by the kernels of the contact core."""

    def __init__(self, backend=Backend.CPU, num_workers: Optional[int] = None,
                 max_partial_bytes: int = DEFAULT_PARTIAL_BYTES):
        self.backend = Backend(backend)
        if num_workers is None:
            num_workers = default_workers(self.backend)
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        if self.backend == Backend.SERIAL and num_workers != 1:
            raise ValueError("The serial backend runs exactly one worker")
        self.num_workers = int(num_workers)
        if max_partial_bytes < PARTIAL_BYTES_PER_PARTICLE:
            raise ValueError(f"max_partial_bytes must hold at least one row entry, got {max_partial_bytes}")
        self.max_partial_bytes = int(max_partial_bytes)

    @staticmethod
    def from_config(config) -> 'LoopBackend':
        return LoopBackend(config.backend, config.num_workers)

    @property
    def name(self) -> str:
        return self.backend.value

    @property
    def arch(self):
        backend = self.backend
        if backend == Backend.AUTO:
            backend = get_backend() or Backend.CPU
        return backend_to_arch(backend)

    def chunk_size(self, n: int, num_workers: Optional[int] = None) -> int:
        """Number of consecutive work items owned by one worker."""
        workers = self.num_workers if num_workers is None else num_workers
        return max(1, -(-n // workers))

    def accumulator_workers(self, size: int) -> int:
        """
        Workers given a private accumulator row of `size` particles.

        Capped so that the rows fit in max_partial_bytes; the remaining
        workers of the layout are folded onto fewer, longer chunks.
        """
        row_bytes = PARTIAL_BYTES_PER_PARTICLE * max(size, 1)
        return max(1, min(self.num_workers, self.max_partial_bytes // row_bytes))

    def __repr__(self):
        return f"LoopBackend({self.name!r}, num_workers={self.num_workers})"
