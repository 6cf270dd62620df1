"""Rank detection and dispatch to rank-specific array constructors."""

from __future__ import annotations

import logging
from typing import Callable

from .arrays import asarray1d, asarray2d, asarray3d, asarray4d
from .errors import UnsupportedRankError
from .shape import Shape, probe_shape

logger = logging.getLogger(__name__)

Constructor = Callable[[object], object]


class Dispatcher:
    """Maps a detected rank to the constructor that builds it.

    The probe is bounded one level past the highest registered rank, so inputs
    nested deeper than anything constructible fail fast instead of being walked
    to the bottom.
    """

    def __init__(self, constructors: dict[int, Constructor] | None = None) -> None:
        self._constructors: dict[int, Constructor] = {}
        for rank, constructor in (constructors or {}).items():
            self.register(rank, constructor)

    def register(self, rank: int, constructor: Constructor) -> None:
        if rank < 1:
            raise ValueError(f"rank must be >= 1, got {rank}")
        if not callable(constructor):
            raise TypeError(f"constructor for rank {rank} must be callable")
        self._constructors[rank] = constructor

    @property
    def supported_ranks(self) -> tuple[int, ...]:
        return tuple(sorted(self._constructors))

    def constructor_for(self, rank: int) -> Constructor:
        try:
            return self._constructors[rank]
        except KeyError:
            raise UnsupportedRankError(rank, self.supported_ranks) from None

    def probe(self, data: object) -> Shape:
        supported = self.supported_ranks
        limit = supported[-1] + 1 if supported else 1
        try:
            return probe_shape(data, limit=limit)
        except UnsupportedRankError as exc:
            raise UnsupportedRankError(exc.rank, supported, at_least=exc.at_least) from None

    def __call__(self, data: object, *, shape: Shape | None = None):
        if shape is None:
            shape = self.probe(data)
        constructor = self.constructor_for(shape.rank)
        logger.debug(
            "dispatching rank-%d input to %s",
            shape.rank,
            getattr(constructor, "__name__", repr(constructor)),
        )
        return constructor(data)


default_dispatcher = Dispatcher(
    {
        1: asarray1d,
        2: asarray2d,
        3: asarray3d,
        4: asarray4d,
    }
)


def classify_and_build(data: object, *, shape: Shape | None = None):
    """Build an array handle whose rank matches the nesting depth of `data`.

    Rank is read off the leftmost path (`data[0]`, `data[0][0]`, ...) unless a
    precomputed `shape` is passed. `data` is forwarded unchanged and the
    constructor's result, or its exception, is returned as is.
    """
    return default_dispatcher(data, shape=shape)


def asarray(data: object):
    return default_dispatcher(data)
