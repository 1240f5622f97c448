'''
Contact model parameter settings
'''
import math
from dataclasses import dataclass
from abc import ABC, abstractmethod


class ContactModelConfig(ABC):
    """Base class for contact models."""

    @abstractmethod
    def get_model_name(self) -> str:
        pass

    @abstractmethod
    def validate(self):
        pass


@dataclass
class HertzContactConfig(ContactModelConfig):
    """Hertzian spring-damper normal contact model."""
    youngs_modulus: float = 1e6        # Pa
    restitution: float = 0.5
    steps_per_collision: float = 50.0

    def get_model_name(self) -> str:
        return "hertz"

    @property
    def beta(self) -> float:
        """Damping ratio derived from the restitution coefficient."""
        return math.pi / math.log(self.restitution)

    def validate(self):
        if self.youngs_modulus <= 0:
            raise ValueError(f"Young's modulus must be positive, got {self.youngs_modulus}")
        if not (0 < self.restitution < 1):
            raise ValueError(f"Restitution coefficient must be in (0, 1), got {self.restitution}")
        if self.steps_per_collision <= 0:
            raise ValueError(f"Steps per collision must be positive, got {self.steps_per_collision}")
