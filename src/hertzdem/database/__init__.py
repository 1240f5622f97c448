"""
State containers feeding the contact core.

Node lists hold host arrays per particle group; ParticleState flattens
them into Taichi fields, PairList carries the candidate pairs of a step and
StateDerivatives receives the results.
"""

from .nodelist import NodeList
from .state import ParticleState
from .pairs import PairList
from .derivatives import StateDerivatives
from .utils import next_pow2

__all__ = [
    "NodeList",
    "ParticleState",
    "PairList",
    "StateDerivatives",
    "next_pow2",
]
