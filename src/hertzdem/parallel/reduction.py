"""
Conflict-free reductions for the parallel loops of the DEM contact core.

Each worker of a loop writes only to its own row of a partial buffer.
A second kernel (or the host) folds the rows after the loop has finished;
the kernel boundary acts as the barrier between the two phases, so no
locks or atomics are needed on the hot path and the folded result does
not depend on how the work was scheduled.
"""

import math
import numpy as np
import taichi as ti

NO_FAULT = 2 ** 31 - 1


@ti.data_oriented
class PartialAccumulator:
    """
    Per-worker accumulation rows for a per-particle vector field.

    Row w of `partial` is owned by worker w during a scatter loop.
    `merge_into` sums the rows of every particle in worker order and adds
    the sum to the target field exactly once.
    """

    def __init__(self, num_workers: int, size: int):
        self.num_workers = num_workers
        self.size = size
        self.partial = ti.Vector.field(3, dtype=float, shape=(num_workers, max(size, 1)))

    def clear(self):
        self.partial.fill(0.0)

    @ti.kernel
    def merge_into(self, n: int, target: ti.template()):
        for i in range(n):
            acc = ti.Vector([0.0, 0.0, 0.0])
            for w in range(self.num_workers):
                acc += self.partial[w, i]
            target[i] += acc


@ti.data_oriented
class MinReduction:
    """Per-worker private minima committed as one scalar."""

    IDENTITY = math.inf

    def __init__(self, num_workers: int):
        self.num_workers = num_workers
        self.partial = ti.field(dtype=float, shape=num_workers)

    def clear(self):
        self.partial.fill(self.IDENTITY)

    def commit(self) -> float:
        return float(np.min(self.partial.to_numpy()))


@ti.data_oriented
class FaultIndex:
    """
    Lowest offending work-item index per fault kind.

    Kernels cannot raise, so they record the item that violated a
    precondition and the host turns it into an exception afterwards.
    """

    def __init__(self, kinds: int):
        self.kinds = kinds
        self.index = ti.field(dtype=ti.i32, shape=kinds)

    def clear(self):
        self.index.fill(NO_FAULT)

    @ti.func
    def record(self, kind, k):
        ti.atomic_min(self.index[kind], k)

    def first(self, kind: int):
        k = int(self.index[kind])
        return None if k == NO_FAULT else k
