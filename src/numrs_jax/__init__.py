"""numrs-jax public API."""

from .arrays import (
    Array1D,
    Array2D,
    Array3D,
    Array4D,
    NDArray,
    asarray1d,
    asarray2d,
    asarray3d,
    asarray4d,
)
from .config import RuntimeConfig, get_config, load_config, set_config
from .dispatch import Dispatcher, asarray, classify_and_build, default_dispatcher
from .errors import (
    ArrayShapeError,
    ConfigError,
    NumrsError,
    ShapeProbeError,
    UnsupportedRankError,
)
from .shape import Flat, Nested, Shape, is_numeric_leaf, probe_shape, shape_from_rank

__all__ = [
    "classify_and_build",
    "asarray",
    "Dispatcher",
    "default_dispatcher",
    "probe_shape",
    "is_numeric_leaf",
    "shape_from_rank",
    "Shape",
    "Flat",
    "Nested",
    "NDArray",
    "Array1D",
    "Array2D",
    "Array3D",
    "Array4D",
    "asarray1d",
    "asarray2d",
    "asarray3d",
    "asarray4d",
    "RuntimeConfig",
    "get_config",
    "load_config",
    "set_config",
    "NumrsError",
    "ShapeProbeError",
    "UnsupportedRankError",
    "ArrayShapeError",
    "ConfigError",
]
