"""
Hertzian DEM contact force evaluator and time-step estimator.
"""

from .demsolver import HertzianDEM, NO_TIME_STEP_CONSTRAINT
from .errors import DEMError, PreconditionViolation, DegenerateGeometryError

__all__ = [
    "HertzianDEM",
    "NO_TIME_STEP_CONSTRAINT",
    "DEMError",
    "PreconditionViolation",
    "DegenerateGeometryError",
]
