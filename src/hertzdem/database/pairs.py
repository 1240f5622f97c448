"""
Candidate contact pair list supplied by the neighbour search.

Pairs are stored in a ContactPair field whose capacity grows by powers of
two, so refilling the list every step with a different number of pairs
does not trigger kernel recompilation.
"""

import logging
from typing import Tuple

import numpy as np
import taichi as ti

from ..dateclass import ContactPair
from .state import ParticleState
from .utils import next_pow2

logger = logging.getLogger(__name__)


def _as_pair_array(pairs) -> np.ndarray:
    arr = np.asarray(pairs, dtype=np.int64)
    if arr.size == 0:
        return np.zeros((0, 4), dtype=np.int64)
    if arr.ndim == 3 and arr.shape[1:] == (2, 2):
        arr = arr.reshape(arr.shape[0], 4)
    if arr.ndim != 2 or arr.shape[1] != 4:
        raise ValueError(
            f"Pairs must be an (n, 4) array of (i_list, i_node, j_list, j_node) "
            f"or a sequence of ((i_list, i_node), (j_list, j_node)), got shape {arr.shape}")
    return arr


@ti.data_oriented
class PairList:
    def __init__(self, state: ParticleState, capacity: int = 1):
        self.state = state
        self.count = 0
        self.capacity = next_pow2(capacity)
        self.cp = ContactPair.field(shape=self.capacity)
        self._host = np.zeros((0, 4), dtype=np.int64)

    def reserve(self, n: int):
        if n <= self.capacity:
            return
        self.capacity = next_pow2(n)
        self.cp = ContactPair.field(shape=self.capacity)
        logger.debug(f"PairList capacity grown to {self.capacity}")

    def assign(self, pairs) -> 'PairList':
        '''
        Replace the pair list for the current step.
        '''
        arr = _as_pair_array(pairs)
        self._validate(arr)
        n = arr.shape[0]
        self.reserve(n)

        padded = np.zeros((self.capacity, 4), dtype=np.int32)
        padded[:n] = arr
        self.cp.i_list.from_numpy(np.ascontiguousarray(padded[:, 0]))
        self.cp.i_node.from_numpy(np.ascontiguousarray(padded[:, 1]))
        self.cp.j_list.from_numpy(np.ascontiguousarray(padded[:, 2]))
        self.cp.j_node.from_numpy(np.ascontiguousarray(padded[:, 3]))

        self._host = arr
        self.count = n
        return self

    def _validate(self, arr: np.ndarray):
        if arr.shape[0] == 0:
            return
        state = self.state
        sizes = np.array([nl.size for nl in state.node_lists], dtype=np.int64)
        for side, (lcol, ncol) in (("i", (0, 1)), ("j", (2, 3))):
            lists, nodes = arr[:, lcol], arr[:, ncol]
            bad = (lists < 0) | (lists >= state.num_node_lists)
            if np.any(bad):
                k = int(np.argmax(bad))
                raise ValueError(f"Pair {k}: {side}_list {lists[k]} out of range [0, {state.num_node_lists})")
            bad = (nodes < 0) | (nodes >= sizes[lists])
            if np.any(bad):
                k = int(np.argmax(bad))
                raise ValueError(f"Pair {k}: {side}_node {nodes[k]} out of range for node list {lists[k]}")
        same = (arr[:, 0] == arr[:, 2]) & (arr[:, 1] == arr[:, 3])
        if np.any(same):
            k = int(np.argmax(same))
            raise ValueError(f"Pair {k} references particle ({arr[k, 0]}, {arr[k, 1]}) twice")

    def pair_id(self, k: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        row = self._host[k]
        return (int(row[0]), int(row[1])), (int(row[2]), int(row[3]))

    def to_numpy(self) -> np.ndarray:
        return self._host.copy()

    def __len__(self):
        return self.count
