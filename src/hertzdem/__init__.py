"""
Hertzian DEM contact core.

Contact force accumulation and stability time-step estimation for rigid
spherical particles, written with Taichi kernels that run on serial,
multi-threaded CPU or accelerator backends.
"""

from .demconfig import DEMSolverConfig, HertzContactConfig, DomainBounds
from .database import NodeList, ParticleState, PairList, StateDerivatives
from .demsolver import (
    HertzianDEM,
    NO_TIME_STEP_CONSTRAINT,
    DEMError,
    PreconditionViolation,
    DegenerateGeometryError,
)
from .parallel import Backend, Precision, LoopBackend, init

__all__ = [
    "DEMSolverConfig",
    "HertzContactConfig",
    "DomainBounds",
    "NodeList",
    "ParticleState",
    "PairList",
    "StateDerivatives",
    "HertzianDEM",
    "NO_TIME_STEP_CONSTRAINT",
    "DEMError",
    "PreconditionViolation",
    "DegenerateGeometryError",
    "Backend",
    "Precision",
    "LoopBackend",
    "init",
]
