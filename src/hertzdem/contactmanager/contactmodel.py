"""
Contact force models for particle–particle interactions in DEM simulations.

This module defines the interface shared by the normal contact laws: the
force magnitude along the contact normal, and the per-particle contact
period term used by the stability time-step estimator.
"""

import taichi as ti


@ti.data_oriented
class ContactModel:

    name = "contact model"

    def __init__(self, config):
        self.config = config

    @ti.func
    def normal_force(self, mi, mj, Ri, Rj, delta, vn):
        """
        Compute the normal contact force magnitude between two particles.

        Args:
            mi, mj (float): Particle masses
            Ri, Rj (float): Particle radii
            delta (float): Normal overlap, positive in contact
            vn (float): Relative velocity projected on the contact normal (i - j)

        Returns:
            Signed force magnitude along the normal pointing from j to i.
        """
        pass

    @ti.func
    def contact_time_term(self, m, R):
        """
        Per-particle quantity whose minimum over all particles bounds the
        contact period.
        """
        pass

    def critical_time(self, min_term: float) -> float:
        """Contact period derived from the minimum of contact_time_term."""
        pass
