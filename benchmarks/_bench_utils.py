"""Shared benchmark runtime helpers."""

from __future__ import annotations

import math
import os
import platform
import time
from typing import Any, Callable

import jax

from numrs_jax import get_config

AFFINITY_ENV = "NUMRS_JAX_BENCH_CPU_AFFINITY"

THREAD_ENV_VARS = (
    "OMP_NUM_THREADS",
    "JAX_NUM_THREADS",
    "XLA_FLAGS",
    "NUMRS_JAX_DTYPE",
    "NUMRS_JAX_PAR_SUM_THRESHOLD",
)


def configure_cpu_affinity_from_env() -> dict[str, Any]:
    requested = os.environ.get(AFFINITY_ENV, "").strip()
    info: dict[str, Any] = {"requested": requested or None, "applied": False, "active": None}
    if not requested or not hasattr(os, "sched_setaffinity"):
        return info

    cpus = parse_affinity_spec(requested)
    if not cpus:
        return info
    try:
        os.sched_setaffinity(0, cpus)
    except OSError:
        return info
    info["applied"] = True
    info["active"] = sorted(int(cpu) for cpu in os.sched_getaffinity(0))
    return info


def parse_affinity_spec(spec: str) -> set[int]:
    """`"0-3,6"` -> `{0, 1, 2, 3, 6}`."""
    out: set[int] = set()
    for part in spec.split(","):
        token = part.strip()
        if not token:
            continue
        if "-" in token:
            lo_raw, hi_raw = token.split("-", 1)
            lo, hi = sorted((int(lo_raw), int(hi_raw)))
            out.update(range(lo, hi + 1))
            continue
        out.add(int(token))
    return out


def host_metadata() -> dict[str, Any]:
    config = get_config()
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "jax": getattr(jax, "__version__", "unknown"),
        "backend": jax.default_backend(),
        "cpu_count": os.cpu_count(),
        "dtype": config.dtype,
        "par_sum_threshold": config.par_sum_threshold,
        "thread_env": {name: os.environ[name] for name in THREAD_ENV_VARS if name in os.environ},
    }


def time_call_ms(fn: Callable[[], object], *, repeats: int, warmup: int) -> list[float]:
    for _ in range(max(0, warmup)):
        fn()
    rows: list[float] = []
    for _ in range(repeats):
        start_ns = time.perf_counter_ns()
        fn()
        rows.append((time.perf_counter_ns() - start_ns) / 1e6)
    return rows


def mean(values: list[float]) -> float:
    return sum(values) / len(values)


def stddev(values: list[float]) -> float:
    if len(values) < 2:
        return 0.0
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / (len(values) - 1))


def percentile(values: list[float], q: float) -> float:
    ordered = sorted(values)
    if len(ordered) == 1:
        return ordered[0]
    pos = (len(ordered) - 1) * q
    lo = int(math.floor(pos))
    hi = int(math.ceil(pos))
    if lo == hi:
        return ordered[lo]
    alpha = pos - lo
    return ordered[lo] * (1.0 - alpha) + ordered[hi] * alpha
