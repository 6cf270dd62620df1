"""Structured error types for shape probing, dispatch and array construction."""

from __future__ import annotations


class NumrsError(Exception):
    """Base class for structured numrs-jax errors."""


class ShapeProbeError(NumrsError, IndexError):
    """Leftmost-path probe could not index one of the levels."""

    def __init__(self, reason: str, path: tuple[int, ...] = ()) -> None:
        self.reason = reason
        self.path = path
        super().__init__(str(self))

    def __str__(self) -> str:
        where = "data" + "".join(f"[{idx}]" for idx in self.path)
        return f"cannot probe {where}: {self.reason}"


class UnsupportedRankError(NumrsError, ValueError):
    """No constructor is registered for the detected rank."""

    def __init__(self, rank: int, supported: tuple[int, ...] = (), *, at_least: bool = False) -> None:
        self.rank = rank
        self.supported = supported
        self.at_least = at_least
        super().__init__(str(self))

    def __str__(self) -> str:
        detected = f">= {self.rank}" if self.at_least else str(self.rank)
        if not self.supported:
            return f"unsupported rank {detected}"
        ranks = ", ".join(str(r) for r in self.supported)
        return f"unsupported rank {detected}; supported ranks: {ranks}"


class ArrayShapeError(NumrsError, ValueError):
    """Array construction or arithmetic shape/rank mismatch."""


class ConfigError(NumrsError, ValueError):
    """Invalid runtime configuration value."""
