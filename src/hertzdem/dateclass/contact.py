"""
Contact pair data structure for the DEM contact core.

A pair references two particles by (node list, node) so that pairs may
cross particle groups. The orientation (i, j) is fixed for a step: the
force applied to i is the negation of the force applied to j.
"""

import taichi as ti


@ti.dataclass
class ContactPair:
    """Candidate interaction between two particles."""
    i_list: int             # Node list of the first particle
    i_node: int             # Local index of the first particle
    j_list: int             # Node list of the second particle
    j_node: int             # Local index of the second particle
