import sys
import os
import time

import numpy as np

# Add the source directory to Python path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))), "src"))

# Source packages
from hertzdem import (DEMSolverConfig, DomainBounds, HertzContactConfig, HertzianDEM,
                      NodeList, ParticleState, PairList, StateDerivatives, init)

# =====================================
# Simulation Constants
# =====================================
# Domain boundaries
xmin, xmax = -2.0, 2.0
ymin, ymax = -2.0, 2.0
zmin, zmax = -2.0, 2.0

radius = 0.5            # Particle radius (m)
mass = 1.0              # Particle mass (kg)
approach_speed = 1.0    # Speed of each particle towards the other (m/s)
target_time = 0.3       # Total simulation time (seconds)
report_interval = 500   # Steps between progress reports

domain = DomainBounds(xmin, xmax,
                      ymin, ymax,
                      zmin, zmax)

contact_model = HertzContactConfig(
                youngs_modulus=1e6,
                restitution=0.5,
                steps_per_collision=50.0
                )


def candidate_pairs(grains: NodeList, skin: float = 1.1):
    '''
    Brute-force stand-in for the neighbour search: every pair closer than
    skin times the sum of radii.
    '''
    i, j = np.triu_indices(grains.size, 1)
    distance = np.linalg.norm(grains.position[i] - grains.position[j], axis=1)
    close = distance < skin * (grains.radius[i] + grains.radius[j])
    return [((0, a), (0, b)) for a, b in zip(i[close], j[close])]


def main():
    """
    Head-on collision of two spheres integrated with the voted time step.

    The damping term of the contact law is not clamped, so it pulls the
    spheres together while they separate. At low restitution this can hold
    the pair in contact; the script reports whether the spheres came apart.
    """
    init("cpu", "f64")

    config = DEMSolverConfig(domain=domain, contact_model=contact_model, backend="cpu")
    print(config.summary())

    grains = NodeList("grains",
                      mass=[mass, mass],
                      radius=[radius, radius],
                      position=[[-0.6, 0.0, 0.0], [0.6, 0.0, 0.0]],
                      velocity=[[approach_speed, 0.0, 0.0], [-approach_speed, 0.0, 0.0]])
    state = ParticleState([grains])
    pairs = PairList(state)
    derivs = StateDerivatives(state)
    solver = HertzianDEM(config)

    dt, label = solver.dt(state)
    print(f"{label}: {dt:.6e} s")
    nsteps = int(target_time / dt)

    start_time = time.time()
    for step in range(1, nsteps + 1):
        pairs.assign(candidate_pairs(grains))
        derivs.zero()
        solver.evaluate_derivatives(state, pairs, derivs, time=step * dt, dt=dt)

        # Explicit Euler on both derivative fields
        d = derivs.to_numpy()
        grains.position += d["DxDt"] * dt
        grains.velocity += d["DvDt"] * dt
        state.sync()

        if step % report_interval == 0:
            print(f"Solved steps: {step} / {nsteps} ({step / nsteps * 100:.2f}%)")

    rebound_speed = 0.5 * (grains.velocity[1, 0] - grains.velocity[0, 0])
    gap = grains.position[1, 0] - grains.position[0, 0] - 2.0 * radius
    if gap > 0.0:
        print(f"Spheres separated, rebound speed ratio: {rebound_speed / approach_speed:.4f}")
    else:
        print(f"Spheres remain in contact (overlap {-gap:.3e} m), damping absorbed the rebound")
    print(f"Total execution time: {time.time() - start_time:.2f} seconds")


if __name__ == '__main__':
    main()
