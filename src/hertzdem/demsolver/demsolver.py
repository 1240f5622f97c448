import copy
import logging
import math
from typing import Optional, Tuple

import taichi as ti
import taichi.math as tm

from .errors import PreconditionViolation, DegenerateGeometryError
from ..contactmanager import create_contact_model
from ..database import ParticleState, PairList, StateDerivatives
from ..demconfig import DEMSolverConfig, DomainBounds, HertzContactConfig
from ..parallel import LoopBackend, PartialAccumulator, MinReduction, FaultIndex, runtime

logger = logging.getLogger(__name__)


#=====================================
# Environmental Variables
#=====================================
# Returned by dt() for an empty particle population: the identity of the
# minimum reduction. Callers must not hand it to an integrator.
NO_TIME_STEP_CONSTRAINT: float = math.inf

# Fault kinds recorded by the kernels
BAD_PARTICLE = 0
COINCIDENT = 1


@ti.data_oriented
class HertzianDEM:
    '''
    Hertzian spring-damper contact physics for spherical particles.

    Two operations per step:
        evaluate_derivatives - contact accelerations and the kinematic DxDt = v
        dt                   - stable time-step vote from mass and stiffness

    Both loops are split across the workers of a LoopBackend. Contact
    accelerations are scattered into per-worker private rows and merged
    once after the pair loop, so no contribution is lost whatever the
    backend or worker count.
    '''

    def __init__(self, config: DEMSolverConfig, backend: Optional[LoopBackend] = None):
        self._config = copy.deepcopy(config)
        self.backend = backend if backend is not None else LoopBackend.from_config(config)
        self._check_arch()
        self.contact_model = create_contact_model(self._config.contact_model)
        self.steps_per_collision = float(self._config.contact_model.steps_per_collision)

        self.faults = FaultIndex(2)
        self.min_term = MinReduction(self.backend.num_workers)
        self._accumulator: Optional[PartialAccumulator] = None

        logger.info(f"Activated {self.contact_model.name} contact model on {self.backend}")

    @staticmethod
    def create(youngs_modulus: float,
               restitution: float,
               steps_per_collision: float,
               domain: DomainBounds,
               backend: str = "cpu",
               num_workers: Optional[int] = None) -> 'HertzianDEM':
        """Build the solver from raw contact law parameters."""
        contact = HertzContactConfig(youngs_modulus=youngs_modulus,
                                     restitution=restitution,
                                     steps_per_collision=steps_per_collision)
        config = DEMSolverConfig(domain=domain, contact_model=contact,
                                 backend=backend, num_workers=num_workers)
        return HertzianDEM(config)

    @property
    def youngs_modulus(self) -> float:
        return self.contact_model.youngs_modulus

    @property
    def beta(self) -> float:
        return self.contact_model.beta

    @property
    def domain(self) -> DomainBounds:
        return self._config.domain

    @property
    def config(self) -> DEMSolverConfig:
        """Copy of the configuration the solver was built with."""
        return copy.deepcopy(self._config)

    def _check_arch(self):
        active = runtime.get_backend()
        if active is None:
            return
        if runtime.backend_to_arch(active) != self.backend.arch:
            logger.warning(f"{self.backend} targets {self.backend.arch} but the Taichi runtime was "
                           f"initialised on {active.value}; kernels run on {active.value}")

    # >>> time step
    ###------------------###
    def label(self) -> str:
        return f"{self.contact_model.name} vote for time-step"

    def dt(self, state: ParticleState, derivs: Optional[StateDerivatives] = None,
           current_time: float = 0.0) -> Tuple[float, str]:
        '''
        Largest step resolving every contact over steps_per_collision steps.

        Returns (step, label). An empty state yields NO_TIME_STEP_CONSTRAINT.
        '''
        n = state.count
        if n == 0:
            return NO_TIME_STEP_CONSTRAINT, self.label()

        self.min_term.clear()
        self.faults.clear()
        self._min_contact_time(n, self.backend.chunk_size(n), state.gf, self.min_term.partial)

        k = self.faults.first(BAD_PARTICLE)
        if k is not None:
            pid = state.particle_id(k)
            raise PreconditionViolation(
                f"Particle {pid} has mass={state.mass(k)}, radius={state.radius(k)}; both must be positive",
                particle=pid)

        min_term = self.min_term.commit()
        step = self.contact_model.critical_time(min_term) / self.steps_per_collision
        return step, self.label()

    @ti.kernel
    def _min_contact_time(self, n: int, chunk: int, gf: ti.template(), partial: ti.template()):
        for w in range(self.backend.num_workers):
            lo = ti.min(w * chunk, n)
            hi = ti.min(lo + chunk, n)
            local_min = tm.inf
            for i in range(lo, hi):
                mi = gf[i].mass
                Ri = gf[i].radius
                if mi <= 0.0 or Ri <= 0.0:
                    self.faults.record(BAD_PARTICLE, i)
                    continue
                local_min = ti.min(local_min, self.contact_model.contact_time_term(mi, Ri))
            partial[w] = local_min

    # <<< time step
    ###------------------###

    # >>> derivatives
    ###------------------###
    def evaluate_derivatives(self, state: ParticleState, pairs: PairList, derivs: StateDerivatives,
                             time: float = 0.0, dt: float = 0.0):
        '''
        Add the contact accelerations of every pair to derivs.DvDt and copy
        the velocities into derivs.DxDt.

        Raises PreconditionViolation or DegenerateGeometryError before
        anything is written to derivs.
        '''
        if pairs.state is not state or derivs.state is not state:
            raise ValueError("pairs and derivs must be built on the evaluated state")

        n = state.count
        npairs = pairs.count
        if npairs > 0:
            acc = self._partial_accumulator(n)
            acc.clear()
            self.faults.clear()
            nw = acc.num_workers
            self._accumulate_pairs(npairs, nw, self.backend.chunk_size(npairs, nw),
                                   state.gf, state.group_offset, pairs.cp, acc.partial)
            self._check_pair_faults(state, pairs)
            # Reduce the worker rows into the caller's field
            acc.merge_into(n, derivs.DvDt)

        if n > 0:
            self._copy_velocity(n, self.backend.chunk_size(n), state.gf, derivs.DxDt)
        logger.debug(f"Evaluated {npairs} pairs over {n} particles")

    def _partial_accumulator(self, n: int) -> PartialAccumulator:
        if self._accumulator is None or self._accumulator.size != n:
            self._accumulator = PartialAccumulator(self.backend.accumulator_workers(n), n)
        return self._accumulator

    def _check_pair_faults(self, state: ParticleState, pairs: PairList):
        k = self.faults.first(BAD_PARTICLE)
        if k is not None:
            pair = pairs.pair_id(k)
            for pid in pair:
                idx = state.global_index(*pid)
                mass, radius = state.mass(idx), state.radius(idx)
                if mass <= 0.0 or radius <= 0.0:
                    raise PreconditionViolation(
                        f"Pair {k} {pair[0]}-{pair[1]}: particle {pid} has mass={mass}, radius={radius}; "
                        f"both must be positive",
                        particle=pid, pair=pair)

        k = self.faults.first(COINCIDENT)
        if k is not None:
            pair = pairs.pair_id(k)
            raise DegenerateGeometryError(
                f"Pair {k} {pair[0]}-{pair[1]}: coincident positions, contact normal undefined",
                pair=pair)

    @ti.kernel
    def _accumulate_pairs(self, npairs: int, nw: int, chunk: int, gf: ti.template(), offset: ti.template(),
                          cp: ti.template(), partial: ti.template()):
        for w in range(nw):
            lo = ti.min(w * chunk, npairs)
            hi = ti.min(lo + chunk, npairs)
            for k in range(lo, hi):
                i = offset[cp[k].i_list] + cp[k].i_node
                j = offset[cp[k].j_list] + cp[k].j_node

                mi = gf[i].mass
                mj = gf[j].mass
                Ri = gf[i].radius
                Rj = gf[j].radius
                if mi <= 0.0 or mj <= 0.0 or Ri <= 0.0 or Rj <= 0.0:
                    self.faults.record(BAD_PARTICLE, k)
                    continue

                # are we overlapping ?
                rij = gf[i].position - gf[j].position
                distance = rij.norm()
                delta = (Ri + Rj) - distance

                if delta > 0.0:
                    if distance == 0.0:
                        self.faults.record(COINCIDENT, k)
                        continue
                    vij = gf[i].velocity - gf[j].velocity
                    rhatij = rij / distance
                    vn = vij.dot(rhatij)

                    f = self.contact_model.normal_force(mi, mj, Ri, Rj, delta, vn)
                    # Row w belongs to this worker only
                    partial[w, i] += f / mi * rhatij
                    partial[w, j] -= f / mj * rhatij

    @ti.kernel
    def _copy_velocity(self, n: int, chunk: int, gf: ti.template(), DxDt: ti.template()):
        for w in range(self.backend.num_workers):
            lo = ti.min(w * chunk, n)
            hi = ti.min(lo + chunk, n)
            for i in range(lo, hi):
                DxDt[i] = gf[i].velocity

    # <<< derivatives
    ###------------------###
