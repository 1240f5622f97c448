"""Stability time-step estimator tests."""

import math

import numpy as np
import pytest
import taichi as ti

from hertzdem import (
    DomainBounds, HertzianDEM, NodeList, ParticleState, StateDerivatives,
    NO_TIME_STEP_CONSTRAINT, PreconditionViolation,
)


@pytest.fixture(scope="module", autouse=True)
def init_taichi():
    """Initialise Taichi once per module."""
    ti.init(arch=ti.cpu, default_fp=ti.f64)


DOMAIN = DomainBounds(0.0, 1.0, 0.0, 1.0, 0.0, 1.0)


def make_solver(E=1e6, steps=50.0, backend="serial", num_workers=None):
    return HertzianDEM.create(E, 0.5, steps, DOMAIN, backend=backend, num_workers=num_workers)


def reference_step(mass, radius, E, steps):
    terms = [m * m / (16.0 / 9.0 * E * E * R) for m, R in zip(mass, radius)]
    return math.pi * min(terms) ** 0.25 / steps


def grains(mass, radius, name="grains"):
    n = len(mass)
    return NodeList(name, mass=mass, radius=radius,
                    position=np.zeros((n, 3)), velocity=np.zeros((n, 3)))


class TestTimeStep:
    """Step bound from mass and stiffness."""

    def test_single_particle(self):
        state = ParticleState([grains([2.0], [0.5])])
        step50, label = make_solver(steps=50.0).dt(state)
        step25, _ = make_solver(steps=25.0).dt(state)

        assert math.isfinite(step50)
        assert step50 > 0.0
        assert step50 < step25
        assert step50 == pytest.approx(reference_step([2.0], [0.5], 1e6, 50.0), rel=1e-12)
        assert label == "Hertzian DEM vote for time-step"

    def test_inverse_in_steps_per_collision(self):
        state = ParticleState([grains([2.0, 0.3], [0.5, 0.1])])
        base, _ = make_solver(steps=10.0).dt(state)
        for steps in (20.0, 40.0, 80.0):
            step, _ = make_solver(steps=steps).dt(state)
            assert step == pytest.approx(base * 10.0 / steps, rel=1e-12)

    def test_stiffer_material_gives_smaller_step(self):
        state = ParticleState([grains([1.0], [0.5])])
        soft, _ = make_solver(E=1e6).dt(state)
        stiff, _ = make_solver(E=1e8).dt(state)
        assert stiff < soft

    def test_worst_particle_dominates(self):
        mass = [2.0, 0.01, 5.0]
        radius = [0.5, 0.2, 1.0]
        state = ParticleState([grains(mass, radius)])
        step, _ = make_solver().dt(state)
        assert step == pytest.approx(reference_step(mass, radius, 1e6, 50.0), rel=1e-12)

    def test_derivs_and_time_are_accepted(self):
        state = ParticleState([grains([2.0], [0.5])])
        derivs = StateDerivatives(state)
        step, _ = make_solver().dt(state, derivs, 1.5)
        assert step == pytest.approx(reference_step([2.0], [0.5], 1e6, 50.0), rel=1e-12)


class TestTimeStepOrdering:
    """Particle order and worker layout do not change the minimum."""

    @pytest.mark.parametrize("workers", [1, 2, 5, 16])
    def test_worker_count(self, workers):
        rng = np.random.default_rng(2)
        mass = rng.uniform(0.1, 3.0, size=50)
        radius = rng.uniform(0.05, 0.5, size=50)
        state = ParticleState([grains(mass, radius)])

        serial, _ = make_solver(backend="serial").dt(state)
        parallel, _ = make_solver(backend="cpu", num_workers=workers).dt(state)
        assert parallel == serial

    def test_permuted_particles_and_groups(self):
        rng = np.random.default_rng(4)
        mass = rng.uniform(0.1, 3.0, size=30)
        radius = rng.uniform(0.05, 0.5, size=30)
        perm = rng.permutation(30)

        one_group = ParticleState([grains(mass, radius)])
        split = ParticleState([grains(mass[perm[:10]], radius[perm[:10]], "a"),
                               grains(mass[perm[10:]], radius[perm[10:]], "b")])
        solver = make_solver(backend="cpu", num_workers=3)
        assert solver.dt(split)[0] == solver.dt(one_group)[0]


class TestTimeStepEdges:
    """Empty populations and invalid particles."""

    def test_no_node_lists(self):
        step, label = make_solver().dt(ParticleState([]))
        assert step == NO_TIME_STEP_CONSTRAINT
        assert math.isinf(step)
        assert label == "Hertzian DEM vote for time-step"

    def test_empty_node_list(self):
        empty = NodeList("empty", mass=[], radius=[], position=np.zeros((0, 3)), velocity=np.zeros((0, 3)))
        step, _ = make_solver().dt(ParticleState([empty]))
        assert step == NO_TIME_STEP_CONSTRAINT

    def test_zero_mass(self):
        state = ParticleState([grains([1.0], [0.5], "a"), grains([1.0, 0.0], [0.5, 0.5], "b")])
        with pytest.raises(PreconditionViolation) as excinfo:
            make_solver(backend="cpu", num_workers=2).dt(state)
        assert excinfo.value.particle == (1, 1)

    def test_negative_radius(self):
        state = ParticleState([grains([1.0, 1.0], [-0.1, 0.5])])
        with pytest.raises(PreconditionViolation) as excinfo:
            make_solver().dt(state)
        assert excinfo.value.particle == (0, 0)
