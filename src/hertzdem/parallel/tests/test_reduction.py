"""Loop backend layout and per-worker reduction tests."""

import math
import os

import numpy as np
import pytest
import taichi as ti

from hertzdem.parallel import Backend, LoopBackend, PartialAccumulator, MinReduction, FaultIndex
from hertzdem.parallel.backend import ACCELERATOR_WORKERS, DEFAULT_PARTIAL_BYTES, PARTIAL_BYTES_PER_PARTICLE


@pytest.fixture(scope="module", autouse=True)
def init_taichi():
    """Initialise Taichi once per module."""
    ti.init(arch=ti.cpu, default_fp=ti.f64)


class TestLoopBackend:

    def test_default_workers(self):
        assert LoopBackend("serial").num_workers == 1
        assert LoopBackend(Backend.CPU).num_workers == (os.cpu_count() or 1)
        assert LoopBackend("cuda").num_workers == ACCELERATOR_WORKERS

    def test_arch(self):
        assert LoopBackend("serial").arch == ti.cpu
        assert LoopBackend("cuda").arch == ti.cuda

    def test_serial_runs_one_worker(self):
        with pytest.raises(ValueError):
            LoopBackend("serial", num_workers=2)

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            LoopBackend("cpu", num_workers=0)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            LoopBackend("opencl")

    def test_accumulator_workers_fit_budget(self):
        backend = LoopBackend("cuda")
        assert backend.num_workers == ACCELERATOR_WORKERS
        assert backend.accumulator_workers(10) == ACCELERATOR_WORKERS

        n = 200_000
        workers = backend.accumulator_workers(n)
        assert 1 <= workers < ACCELERATOR_WORKERS
        assert workers * n * PARTIAL_BYTES_PER_PARTICLE <= DEFAULT_PARTIAL_BYTES

    def test_accumulator_keeps_one_row(self):
        backend = LoopBackend("cpu", num_workers=8, max_partial_bytes=PARTIAL_BYTES_PER_PARTICLE)
        assert backend.accumulator_workers(1_000_000) == 1

    def test_budget_below_one_entry(self):
        with pytest.raises(ValueError):
            LoopBackend("cpu", max_partial_bytes=1)

    @pytest.mark.parametrize("n, workers, chunk", [(10, 4, 3), (8, 4, 2), (3, 8, 1), (0, 4, 1), (7, 1, 7)])
    def test_chunk_covers_every_item(self, n, workers, chunk):
        backend = LoopBackend("cpu", num_workers=workers)
        assert backend.chunk_size(n) == chunk
        assert backend.chunk_size(n) * workers >= n


class TestPartialAccumulator:

    def test_merge_sums_worker_rows(self):
        acc = PartialAccumulator(num_workers=3, size=4)
        rows = np.arange(3 * 4 * 3, dtype=float).reshape(3, 4, 3)
        acc.partial.from_numpy(rows)

        target = ti.Vector.field(3, dtype=float, shape=4)
        target.fill(1.0)
        acc.merge_into(4, target)
        assert np.allclose(target.to_numpy(), rows.sum(axis=0) + 1.0)

    def test_merge_limited_to_n(self):
        acc = PartialAccumulator(num_workers=2, size=3)
        acc.partial.fill(2.0)
        target = ti.Vector.field(3, dtype=float, shape=3)
        acc.merge_into(2, target)
        result = target.to_numpy()
        assert np.all(result[:2] == 4.0)
        assert np.all(result[2] == 0.0)

    def test_merge_keeps_double_precision(self):
        acc = PartialAccumulator(num_workers=2, size=1)
        acc.partial.from_numpy(np.array([[[1.0, 0.0, 0.0]], [[1e-12, 0.0, 0.0]]]))
        target = ti.Vector.field(3, dtype=float, shape=1)
        acc.merge_into(1, target)
        assert target.to_numpy()[0, 0] == 1.0 + 1e-12

    def test_clear(self):
        acc = PartialAccumulator(num_workers=2, size=2)
        acc.partial.fill(5.0)
        acc.clear()
        assert np.all(acc.partial.to_numpy() == 0.0)


class TestMinReduction:

    def test_identity_after_clear(self):
        red = MinReduction(num_workers=4)
        red.clear()
        assert math.isinf(red.commit())

    def test_commit_minimum(self):
        red = MinReduction(num_workers=4)
        red.partial.from_numpy(np.array([3.0, 0.5, math.inf, 2.0]))
        assert red.commit() == 0.5


class TestFaultIndex:

    def test_no_fault_after_clear(self):
        faults = FaultIndex(2)
        faults.clear()
        assert faults.first(0) is None
        assert faults.first(1) is None

    def test_first_reports_index(self):
        faults = FaultIndex(2)
        faults.clear()
        faults.index[1] = 7
        assert faults.first(0) is None
        assert faults.first(1) == 7
