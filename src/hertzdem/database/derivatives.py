"""
Per-step derivative storage written by the contact core.
"""

import numpy as np
import taichi as ti

from .state import ParticleState


@ti.data_oriented
class StateDerivatives:
    """
    Rate-of-change fields of one step.

    DxDt     - position derivative (velocity copy)
    DvDt     - acceleration accumulated from contacts
    DomegaDt - spin derivative, not written by the normal contact law
    """

    def __init__(self, state: ParticleState):
        self.state = state
        n = max(state.count, 1)
        self.DxDt = ti.Vector.field(3, dtype=float, shape=n)
        self.DvDt = ti.Vector.field(3, dtype=float, shape=n)
        self.DomegaDt = ti.Vector.field(3, dtype=float, shape=n)
        self.zero()

    def zero(self):
        self.DxDt.fill(0.0)
        self.DvDt.fill(0.0)
        self.DomegaDt.fill(0.0)

    def to_numpy(self) -> dict:
        n = self.state.count
        dim = self.state.dimension
        return {
            "DxDt": self.DxDt.to_numpy()[:n, :dim],
            "DvDt": self.DvDt.to_numpy()[:n, :dim],
            "DomegaDt": self.DomegaDt.to_numpy()[:n],
        }
