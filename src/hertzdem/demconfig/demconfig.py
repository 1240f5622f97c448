from typing import Optional
from .types import DomainBounds
from .contact_model import ContactModelConfig, HertzContactConfig


BACKEND_NAMES = ("serial", "cpu", "cuda", "vulkan", "metal", "auto")


class DEMSolverConfig:
    """Configuration for the DEM contact core."""

    def __init__(self,
                 domain: DomainBounds,
                 contact_model: ContactModelConfig,
                 backend: str = "cpu",
                 num_workers: Optional[int] = None):
        contact_model.validate()
        if backend not in BACKEND_NAMES:
            raise ValueError(f"Unknown backend '{backend}', expected one of {BACKEND_NAMES}")
        if num_workers is not None and num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")

        self.domain = domain
        self.contact_model = contact_model
        self.backend = backend
        self.num_workers = num_workers

        # Only stored for domain decomposition upstream
        self.domain_min, self.domain_max = domain.get_extended_bounds()

    def update_contact_model(self, **kwargs) -> 'DEMSolverConfig':
        for key, value in kwargs.items():
            if hasattr(self.contact_model, key):
                setattr(self.contact_model, key, value)
            else:
                model_name = self.contact_model.get_model_name()
                raise ValueError(f"Unknown parameter '{key}' for {model_name} contact model")
        self.contact_model.validate()
        return self

    def set_backend(self, backend: str, num_workers: Optional[int] = None) -> 'DEMSolverConfig':
        if backend not in BACKEND_NAMES:
            raise ValueError(f"Unknown backend '{backend}', expected one of {BACKEND_NAMES}")
        if num_workers is not None and num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self.backend = backend
        self.num_workers = num_workers
        return self

    def summary(self) -> str:
        """Return a human-readable summary of the configuration."""
        model = self.contact_model
        model_name = model.get_model_name()
        workers = self.num_workers if self.num_workers is not None else "default"

        summary = f"""
DEM Contact Configuration:
==========================
Domain: [{self.domain.xmin}, {self.domain.xmax}] × [{self.domain.ymin}, {self.domain.ymax}] × [{self.domain.zmin}, {self.domain.zmax}]
Backend: {self.backend} (workers: {workers})

Contact Model: {model_name.upper()}
"""
        if isinstance(model, HertzContactConfig):
            summary += f"""- Young's modulus: {model.youngs_modulus} Pa
- Restitution: {model.restitution}
- Steps per collision: {model.steps_per_collision}
"""
        return summary
