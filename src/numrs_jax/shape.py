"""Shape model and leftmost-path rank probe for nested numeric sequences."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Union

from .errors import ShapeProbeError, UnsupportedRankError


@dataclass(frozen=True)
class Flat:
    """Rank-1 shape: the first element is already a primitive number."""

    @property
    def rank(self) -> int:
        return 1


@dataclass(frozen=True)
class Nested:
    """One more level of nesting around `inner`."""

    inner: "Shape"

    @property
    def rank(self) -> int:
        return 1 + self.inner.rank


Shape = Union[Flat, Nested]


def shape_from_rank(rank: int) -> Shape:
    if rank < 1:
        raise ValueError(f"rank must be >= 1, got {rank}")
    shape: Shape = Flat()
    for _ in range(rank - 1):
        shape = Nested(shape)
    return shape


def _is_array(value: object) -> bool:
    # numpy and jax arrays; both expose integer `ndim` and a tuple `shape`.
    return isinstance(getattr(value, "ndim", None), int) and isinstance(getattr(value, "shape", None), tuple)


def is_numeric_leaf(value: object) -> bool:
    """True for real numbers (excluding bool) and 0-d numeric arrays."""
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Real):
        return True
    if _is_array(value) and value.ndim == 0:
        dtype = getattr(value, "dtype", None)
        kind = getattr(dtype, "kind", None)
        # bfloat16 reports kind 'V' in numpy.
        return kind in {"i", "u", "f", "V"}
    return False


def _array_rank(value, path: list[int]) -> int:
    if value.ndim == 0:
        raise ShapeProbeError("0-d array is not indexable", tuple(path))
    for axis, extent in enumerate(value.shape):
        if extent == 0:
            raise ShapeProbeError("empty sequence", tuple(path) + (0,) * axis)
    return value.ndim


def probe_shape(data: object, *, limit: int | None = None) -> Shape:
    """Walk `data[0]`, `data[0][0]`, ... until the first primitive number.

    Only the leftmost path is inspected; sibling elements and values are never
    looked at. `limit` bounds the walk: an input whose leftmost path is deeper
    than `limit` raises `UnsupportedRankError` without descending further.
    """
    path: list[int] = []
    value = data
    while True:
        if limit is not None and len(path) >= limit:
            raise UnsupportedRankError(limit + 1, at_least=True)
        if _is_array(value):
            rank = len(path) + _array_rank(value, path)
            break
        if isinstance(value, (str, bytes, bytearray)):
            raise ShapeProbeError(f"{type(value).__name__} is not a numeric sequence", tuple(path))
        try:
            head = value[0]
        except IndexError:
            raise ShapeProbeError("empty sequence", tuple(path)) from None
        except (TypeError, KeyError) as exc:
            raise ShapeProbeError(f"{type(value).__name__} is not indexable", tuple(path)) from exc
        path.append(0)
        if is_numeric_leaf(head):
            rank = len(path)
            break
        value = head

    if limit is not None and rank > limit:
        raise UnsupportedRankError(rank)
    return shape_from_rank(rank)
