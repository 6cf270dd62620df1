"""Runtime configuration read from ``NUMRS_JAX_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Mapping

from .errors import ConfigError

PAR_SUM_THRESHOLD_ENV: Final[str] = "NUMRS_JAX_PAR_SUM_THRESHOLD"
DTYPE_ENV: Final[str] = "NUMRS_JAX_DTYPE"

SUPPORTED_DTYPES: Final[tuple[str, ...]] = ("float16", "bfloat16", "float32", "float64")


@dataclass(frozen=True)
class RuntimeConfig:
    """Process-wide knobs for array handles.

    - `par_sum_threshold`: `sum()` switches to the tree reduction above this size.
    - `dtype`: element dtype name used when converting nested sequences.
    """

    par_sum_threshold: int = 1_000_000
    dtype: str = "float32"

    def __post_init__(self) -> None:
        if self.par_sum_threshold < 0:
            raise ConfigError(f"par_sum_threshold must be non-negative, got {self.par_sum_threshold}")
        if self.dtype not in SUPPORTED_DTYPES:
            raise ConfigError(f"dtype must be one of {', '.join(SUPPORTED_DTYPES)}; got {self.dtype!r}")


def load_config(environ: Mapping[str, str] | None = None) -> RuntimeConfig:
    env = os.environ if environ is None else environ
    kwargs: dict[str, object] = {}

    raw_threshold = env.get(PAR_SUM_THRESHOLD_ENV, "").strip()
    if raw_threshold:
        try:
            kwargs["par_sum_threshold"] = int(raw_threshold.replace("_", ""))
        except ValueError as exc:
            raise ConfigError(f"{PAR_SUM_THRESHOLD_ENV} must be an integer, got {raw_threshold!r}") from exc

    raw_dtype = env.get(DTYPE_ENV, "").strip().lower()
    if raw_dtype:
        kwargs["dtype"] = raw_dtype

    return RuntimeConfig(**kwargs)


_CONFIG: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def set_config(config: RuntimeConfig | None) -> None:
    """Replace the process config; `None` reloads from the environment on next use."""
    global _CONFIG
    _CONFIG = config
