"""
Contact model registry for DEM simulations.

Provides a unified interface to the normal contact force laws, currently
the Hertzian spring-damper model.
"""

from .contactmodel import ContactModel
from .hertz import HertzianContactModel

__all__ = [
    "ContactModel",
    "HertzianContactModel",
    "create_contact_model",
]


def create_contact_model(config) -> ContactModel:
    """
    Build the contact model matching a contact configuration.

    Raises:
        ValueError: If the configuration names an unknown model.
    """
    model_name = config.get_model_name().lower()
    if model_name == "hertz":
        return HertzianContactModel(config)
    raise ValueError(
        f"Unknown contact model type: '{model_name}'. "
        f"Valid options are 'hertz'."
    )
