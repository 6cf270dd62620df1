"""Fixed-rank array handles backed by ``jax.numpy``.

`Array1D` .. `Array4D` each wrap one immutable `jax.Array` whose `ndim` equals
the class rank. Arithmetic returns fresh handles of the same class; `min` and
`max` are always derived from the wrapped data.
"""

from __future__ import annotations

import logging
import math
import numbers
import time
from typing import ClassVar

import jax
import jax.numpy as jnp

from .config import get_config
from .errors import ArrayShapeError
from .shape import is_numeric_leaf

logger = logging.getLogger(__name__)

PRINT_LIMIT = 100


@jax.jit
def _scan_sum(flat):
    def step(acc, value):
        return acc + value, None

    total, _ = jax.lax.scan(step, jnp.zeros((), dtype=flat.dtype), flat)
    return total


@jax.jit
def _tree_sum(flat):
    return jnp.sum(flat)


def _dtype():
    return getattr(jnp, get_config().dtype)


def _fresh_key() -> jax.Array:
    return jax.random.PRNGKey(time.time_ns() & 0xFFFFFFFF)


class NDArray:
    """Base class for rank-specific array handles."""

    rank: ClassVar[int] = 0

    __slots__ = ("_data",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data) -> None:
        arr = jnp.asarray(data, dtype=_dtype())
        if arr.ndim != self.rank:
            raise ArrayShapeError(
                f"{type(self).__name__} expects rank {self.rank}, got rank {arr.ndim} with shape {tuple(arr.shape)}"
            )
        self._data = arr

    @classmethod
    def _wrap(cls, arr):
        out = cls.__new__(cls)
        out._data = arr
        return out

    @property
    def data(self) -> jax.Array:
        return self._data

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(d) for d in self._data.shape)

    @property
    def size(self) -> int:
        return int(self._data.size)

    @property
    def ndim(self) -> int:
        return self.rank

    @property
    def dtype(self):
        return self._data.dtype

    @property
    def min(self) -> float:
        if self.size == 0:
            raise ArrayShapeError(f"min of empty {type(self).__name__}")
        return float(jnp.min(self._data))

    @property
    def max(self) -> float:
        if self.size == 0:
            raise ArrayShapeError(f"max of empty {type(self).__name__}")
        return float(jnp.max(self._data))

    def seq_sum(self) -> float:
        """Left fold over the flattened data in index order."""
        return float(_scan_sum(self._data.reshape(-1)))

    def par_sum(self) -> float:
        """Tree reduction; XLA is free to split it across cores."""
        return float(_tree_sum(self._data.reshape(-1)))

    def sum(self) -> float:
        threshold = get_config().par_sum_threshold
        if self.size > threshold:
            logger.debug("sum of %d elements above threshold %d; using par_sum", self.size, threshold)
            return self.par_sum()
        return self.seq_sum()

    @classmethod
    def _normalize_shape(cls, shape) -> tuple[int, ...]:
        if isinstance(shape, numbers.Integral):
            shape = (int(shape),)
        shape = tuple(int(d) for d in shape)
        if len(shape) != cls.rank:
            raise ArrayShapeError(f"{cls.__name__} expects a rank-{cls.rank} shape, got {shape}")
        if any(d < 0 for d in shape):
            raise ArrayShapeError(f"negative dimension in shape {shape}")
        return shape

    @classmethod
    def random(cls, shape, *, key: jax.Array | None = None):
        """Uniform samples in [0, 1)."""
        return cls.random_range(shape, 0.0, 1.0, key=key)

    @classmethod
    def random_range(cls, shape, low: float, high: float, *, key: jax.Array | None = None):
        """Uniform samples in [low, high)."""
        if not low < high:
            raise ValueError(f"random_range requires low < high, got [{low}, {high})")
        dims = cls._normalize_shape(shape)
        key = _fresh_key() if key is None else key
        arr = jax.random.uniform(key, dims, dtype=_dtype(), minval=low, maxval=high)
        return cls._wrap(arr)

    def _coerce_operand(self, other, op: str):
        if isinstance(other, NDArray):
            if type(other) is not type(self):
                raise ArrayShapeError(
                    f"cannot {op} {type(self).__name__} and {type(other).__name__}"
                )
            rhs = other._data
        elif is_numeric_leaf(other):
            # Python numbers and 0-d arrays broadcast as scalars.
            return other
        else:
            try:
                rhs = jnp.asarray(other, dtype=self._data.dtype)
            except (TypeError, ValueError):
                return NotImplemented
        if tuple(rhs.shape) != tuple(self._data.shape):
            raise ArrayShapeError(
                f"cannot {op} shapes {self.shape} and {tuple(int(d) for d in rhs.shape)}"
            )
        return rhs

    def _binary(self, other, op: str, fn, *, reflected: bool = False):
        rhs = self._coerce_operand(other, op)
        if rhs is NotImplemented:
            return NotImplemented
        out = fn(rhs, self._data) if reflected else fn(self._data, rhs)
        return self._wrap(out.astype(self._data.dtype))

    def __add__(self, other):
        return self._binary(other, "add", jnp.add)

    def __sub__(self, other):
        return self._binary(other, "subtract", jnp.subtract)

    def __mul__(self, other):
        return self._binary(other, "multiply", jnp.multiply)

    def __truediv__(self, other):
        return self._binary(other, "divide", jnp.true_divide)

    def __radd__(self, other):
        return self._binary(other, "add", jnp.add, reflected=True)

    def __rsub__(self, other):
        return self._binary(other, "subtract", jnp.subtract, reflected=True)

    def __rmul__(self, other):
        return self._binary(other, "multiply", jnp.multiply, reflected=True)

    def __rtruediv__(self, other):
        return self._binary(other, "divide", jnp.true_divide, reflected=True)

    def __eq__(self, other) -> bool:
        if not isinstance(other, NDArray):
            return NotImplemented
        if self.shape != other.shape:
            return False
        return bool(jnp.array_equal(self._data, other._data))

    def __len__(self) -> int:
        return self.shape[0]

    def tolist(self) -> list:
        return self._data.tolist()

    def to_string(self) -> str:
        return _format_block(self.tolist(), self.rank)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        name = type(self).__name__
        if self.size == 0:
            return f"{name} {list(self.shape)}, data: []"
        head = f"{name} {list(self.shape)}, min: {self.min}, max: {self.max}"
        flat = self._data.reshape(-1)
        if self.size > PRINT_LIMIT:
            return f"{head}, data[..{PRINT_LIMIT}] {flat[:PRINT_LIMIT].tolist()}..."
        return f"{head}, data: {flat.tolist()}"


def _format_block(values: list, rank: int) -> str:
    if rank == 1:
        return " ".join(str(v) for v in values)
    sep = "\n" * (rank - 1)
    return sep.join(_format_block(item, rank - 1) for item in values)


class Array1D(NDArray):
    rank = 1
    __slots__ = ()

    @classmethod
    def arange(cls, start: float, stop: float | None = None, step: float = 1.0) -> "Array1D":
        """`arange(stop)` or `arange(start, stop, step)`; every value is strictly below `stop`.

        The element count and values are computed in double precision and only
        then cast to the configured dtype.
        """
        if stop is None:
            start, stop = 0.0, start
        start, stop, step = float(start), float(stop), float(step)
        if step <= 0:
            raise ValueError(f"arange step must be positive, got {step}")
        count = max(0, math.ceil((stop - start) / step))
        while start + count * step < stop:
            count += 1
        while count > 0 and start + (count - 1) * step >= stop:
            count -= 1
        values = [start + k * step for k in range(count)]
        return cls._wrap(jnp.asarray(values, dtype=_dtype()).reshape(count))


class Array2D(NDArray):
    rank = 2
    __slots__ = ()


class Array3D(NDArray):
    rank = 3
    __slots__ = ()


class Array4D(NDArray):
    rank = 4
    __slots__ = ()


def asarray1d(data) -> Array1D:
    return Array1D(data)


def asarray2d(data) -> Array2D:
    return Array2D(data)


def asarray3d(data) -> Array3D:
    return Array3D(data)


def asarray4d(data) -> Array4D:
    return Array4D(data)
