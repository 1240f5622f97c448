"""
Grain (particle) data structure for the DEM contact core.

Represents a spherical discrete element as seen by the contact force
evaluator and the time-step estimator: inertial properties plus the
translational and spin state.

The struct is built by `make_grain_type()` once the runtime is
initialised: `float` resolves to the default precision of ti.init only
when the type is created.
"""

import taichi as ti


def make_grain_type():
    """Return the Grain struct type for the active default precision."""
    Vector3 = ti.types.vector(3, float)

    @ti.dataclass
    class Grain:
        """Represents a spherical DEM particle."""
        groupID: int            # Index of the node list owning the particle
        localID: int            # Index inside the node list

        mass: float             # Particle mass
        radius: float           # Particle radius (assumed spherical)

        # Translational state (global coordinates)
        position: Vector3       # Center position
        velocity: Vector3       # Linear velocity

        # Rotational state (global coordinates)
        omega: Vector3          # Angular velocity

    return Grain
