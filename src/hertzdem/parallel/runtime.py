"""Central Taichi runtime initialisation.

Accelerator auto-detection (CUDA -> Vulkan -> CPU fallback), precision
selection and a once-per-process ti.init.
"""

import enum
import logging
import taichi as ti
from typing import Optional

logger = logging.getLogger(__name__)


class Backend(enum.Enum):
    """Execution backends for the contact core loops."""
    SERIAL = "serial"
    CPU = "cpu"
    CUDA = "cuda"
    VULKAN = "vulkan"
    METAL = "metal"
    AUTO = "auto"


class Precision(enum.Enum):
    """Floating point precision."""
    F32 = "f32"
    F64 = "f64"


# module state
_initialized = False
_active_backend: Optional[Backend] = None
_active_precision: Optional[Precision] = None


def init(backend: Backend = Backend.AUTO, precision: Precision = Precision.F64) -> dict:
    """Initialise the Taichi runtime.

    Runs once per process; repeated calls return the active settings.

    Args:
        backend: backend to use (AUTO tries CUDA, Vulkan, then CPU)
        precision: default floating point precision

    Returns:
        dict describing the active runtime
    """
    global _initialized, _active_backend, _active_precision

    backend = Backend(backend)
    precision = Precision(precision)

    if _initialized:
        return {
            "backend": _active_backend.value,
            "precision": _active_precision.value,
            "already_initialized": True,
        }

    ti_precision = ti.f64 if precision == Precision.F64 else ti.f32
    _active_precision = precision

    if backend == Backend.AUTO:
        for try_backend in [Backend.CUDA, Backend.VULKAN, Backend.CPU]:
            try:
                ti.init(arch=backend_to_arch(try_backend), default_fp=ti_precision)
                _active_backend = try_backend
                _initialized = True
                logger.info(f"Taichi initialised: backend={try_backend.value}, precision={precision.value}")
                return {
                    "backend": _active_backend.value,
                    "precision": _active_precision.value,
                    "already_initialized": False,
                }
            except Exception as e:
                logger.debug(f"{try_backend.value} backend failed: {e}")
                continue
        ti.init(arch=ti.cpu, default_fp=ti_precision)
        _active_backend = Backend.CPU
        logger.warning("All accelerator backends failed, falling back to CPU")
    elif backend == Backend.SERIAL:
        ti.init(arch=ti.cpu, default_fp=ti_precision, cpu_max_num_threads=1)
        _active_backend = backend
        logger.info(f"Taichi initialised: backend=serial, precision={precision.value}")
    else:
        ti.init(arch=backend_to_arch(backend), default_fp=ti_precision)
        _active_backend = backend
        logger.info(f"Taichi initialised: backend={backend.value}, precision={precision.value}")

    _initialized = True
    return {
        "backend": _active_backend.value,
        "precision": _active_precision.value,
        "already_initialized": False,
    }


def get_backend() -> Optional[Backend]:
    """Return the active backend."""
    return _active_backend


def get_precision() -> Optional[Precision]:
    """Return the active precision."""
    return _active_precision


def is_initialized() -> bool:
    return _initialized


def reset():
    """For tests: forget the module state (ti.init itself cannot be undone)."""
    global _initialized, _active_backend, _active_precision
    _initialized = False
    _active_backend = None
    _active_precision = None


def backend_to_arch(backend: Backend):
    """Backend enum -> Taichi arch."""
    mapping = {
        Backend.SERIAL: ti.cpu,
        Backend.CPU: ti.cpu,
        Backend.VULKAN: ti.vulkan,
        Backend.CUDA: ti.cuda,
        Backend.METAL: ti.metal,
    }
    return mapping[backend]
