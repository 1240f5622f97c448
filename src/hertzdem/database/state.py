"""
Particle state snapshot consumed by the contact core.

The node lists are flattened into a single Grain struct field; particle
(g, l) lives at global index offsets[g] + l. Positions, velocities and
spins are stored with three components whatever the problem dimension.
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import taichi as ti

from ..dateclass import make_grain_type
from .nodelist import NodeList
from .utils import pad3

logger = logging.getLogger(__name__)


@ti.data_oriented
class ParticleState:
    def __init__(self, node_lists: Sequence[NodeList]):
        self.node_lists = list(node_lists)

        dims = {nl.dimension for nl in self.node_lists if nl.size > 0}
        if len(dims) > 1:
            raise ValueError(f"All node lists must share one dimension, got {sorted(dims)}")
        self.dimension = dims.pop() if dims else 3

        sizes = [nl.size for nl in self.node_lists]
        self.offsets = np.zeros(len(sizes) + 1, dtype=np.int32)
        self.offsets[1:] = np.cumsum(sizes, dtype=np.int64)
        self.count = int(self.offsets[-1])

        # Taichi fields cannot be empty
        self.gf = make_grain_type().field(shape=max(self.count, 1))
        self.group_offset = ti.field(dtype=ti.i32, shape=len(self.offsets))
        self.group_offset.from_numpy(self.offsets)

        self.sync()
        logger.debug(f"ParticleState: {len(self.node_lists)} node lists, {self.count} particles, dim={self.dimension}")

    @property
    def num_node_lists(self) -> int:
        return len(self.node_lists)

    def sync(self):
        '''
        Push the host arrays of every node list into the Grain field.
        Call after mutating the node list arrays in place.
        '''
        if self.count == 0:
            return
        nls = self.node_lists
        np_group = np.concatenate([np.full(nl.size, g, dtype=np.int32) for g, nl in enumerate(nls)])
        np_local = np.concatenate([np.arange(nl.size, dtype=np.int32) for nl in nls])
        np_mass = np.concatenate([nl.mass for nl in nls])
        np_radius = np.concatenate([nl.radius for nl in nls])
        np_position = np.concatenate([pad3(nl.position) for nl in nls])
        np_velocity = np.concatenate([pad3(nl.velocity) for nl in nls])
        np_omega = np.concatenate([pad3(nl.omega) for nl in nls])

        self.gf.groupID.from_numpy(np_group)
        self.gf.localID.from_numpy(np_local)
        self.gf.mass.from_numpy(np_mass)
        self.gf.radius.from_numpy(np_radius)
        self.gf.position.from_numpy(np_position)
        self.gf.velocity.from_numpy(np_velocity)
        self.gf.omega.from_numpy(np_omega)

    def global_index(self, group: int, local: int) -> int:
        if not (0 <= group < self.num_node_lists):
            raise ValueError(f"Node list index {group} out of range [0, {self.num_node_lists})")
        size = self.node_lists[group].size
        if not (0 <= local < size):
            raise ValueError(f"Node index {local} out of range [0, {size}) for node list {group}")
        return int(self.offsets[group]) + local

    def particle_id(self, index: int) -> Tuple[int, int]:
        """Global index -> (node list, local index)."""
        group = int(np.searchsorted(self.offsets, index, side="right")) - 1
        return group, int(index - self.offsets[group])

    def mass(self, index: int) -> float:
        return float(self.gf.mass[index])

    def radius(self, index: int) -> float:
        return float(self.gf.radius[index])
