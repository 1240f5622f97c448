"""
Hertzian spring-damper contact force model for DEM simulations.

Implements the normal force of two elastic spheres in contact: a Hertzian
elastic term growing with overlap^1.5 and a viscous term proportional to
the normal closing speed, with damping derived from the restitution
coefficient.
"""

import math
import taichi as ti
from .contactmodel import ContactModel


@ti.data_oriented
class HertzianContactModel(ContactModel):
    """
        Hertzian contact model for discrete element method simulation.

        The coefficients depending only on the configuration are computed
        once here and enter the kernels as compile-time constants:

        - 4/3 E            scales the elastic stiffness
        - 4 / (1 + beta^2) scales the damping coefficient
        - 16/9 E^2         scales the stiffness used by the time-step estimate
    """

    name = "Hertzian DEM"

    def __init__(self, config):
        """
        Initialize the Hertzian contact model.

        Args:
            config (HertzContactConfig): Young's modulus and restitution coefficient
        """
        super().__init__(config)
        self.youngs_modulus = float(config.youngs_modulus)
        self.beta = float(config.beta)
        self.Y = 4.0 / 3.0 * self.youngs_modulus
        self.four_over_one_plus_beta_sq = 4.0 / (1.0 + self.beta * self.beta)
        self.Y2eff = 16.0 / 9.0 * self.youngs_modulus * self.youngs_modulus

    @ti.func
    def normal_force(self, mi, mj, Ri, Rj, delta, vn):
        # effective quantities
        m_star = (mi * mj) / (mi + mj)
        R_star = (Ri * Rj) / (Ri + Rj)

        c1 = self.Y * ti.sqrt(R_star)
        c2 = ti.sqrt(m_star * c1 * self.four_over_one_plus_beta_sq)

        # The damping term is not clamped: fast separation may turn the force attractive
        return c1 * ti.sqrt(delta * delta * delta) - c2 * vn

    @ti.func
    def contact_time_term(self, m, R):
        k2 = self.Y2eff * R
        return m * m / k2

    def critical_time(self, min_term: float) -> float:
        return math.pi * min_term ** 0.25
