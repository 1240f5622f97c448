"""
Errors reported by the DEM contact core.

Both kinds are fatal for the step: the derivative fields of a failed
evaluation are left untouched and must not be integrated.
"""


class DEMError(Exception):
    """Base class for contact core failures."""


class PreconditionViolation(DEMError):
    """A particle used by the core has non-positive mass or radius."""

    def __init__(self, message, particle=None, pair=None):
        super().__init__(message)
        self.particle = particle    # (node list, node)
        self.pair = pair            # ((i_list, i_node), (j_list, j_node)) or None


class DegenerateGeometryError(DEMError):
    """Two particles in contact share one position; the contact normal is undefined."""

    def __init__(self, message, pair=None):
        super().__init__(message)
        self.pair = pair
