"""
Core configuration and data types for DEM contact simulations.
"""

# Base classes
from .contact_model import ContactModelConfig, HertzContactConfig
from .types import DomainBounds
from .demconfig import DEMSolverConfig, BACKEND_NAMES

__all__ = [
    "ContactModelConfig",
    "HertzContactConfig",
    "DomainBounds",
    "DEMSolverConfig",
    "BACKEND_NAMES",
]
