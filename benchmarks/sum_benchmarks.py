"""Compare sequential, parallel and auto-selected sums over a random Array1D."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path

import jax

from numrs_jax import Array1D
from _bench_utils import (
    configure_cpu_affinity_from_env,
    host_metadata,
    mean,
    percentile,
    stddev,
    time_call_ms,
)


DEFAULT_SIZE = 10_000_000


@dataclass(frozen=True)
class SumRow:
    method: str
    value: float
    mean_ms: float
    p50_ms: float
    stddev_ms: float
    repeats: int


def run(array: Array1D, *, repeats: int, warmup: int) -> list[SumRow]:
    rows: list[SumRow] = []
    for method in ("seq_sum", "par_sum", "sum"):
        fn = getattr(array, method)
        timings = time_call_ms(fn, repeats=repeats, warmup=warmup)
        rows.append(
            SumRow(
                method=method,
                value=fn(),
                mean_ms=mean(timings),
                p50_ms=percentile(timings, 0.5),
                stddev_ms=stddev(timings),
                repeats=repeats,
            )
        )
    return rows


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--size", type=int, default=DEFAULT_SIZE, help="number of random elements")
    parser.add_argument("--repeats", type=int, default=5, help="timed calls per method")
    parser.add_argument("--warmup", type=int, default=1, help="untimed calls per method (includes jit compile)")
    parser.add_argument("--seed", type=int, default=0, help="PRNG seed for the random array")
    parser.add_argument(
        "--json-out",
        default="",
        help="optional path to write machine-readable benchmark results",
    )
    args = parser.parse_args()
    affinity_info = configure_cpu_affinity_from_env()

    array = Array1D.random(args.size, key=jax.random.PRNGKey(args.seed))
    print(repr(array))
    print()

    rows = run(array, repeats=args.repeats, warmup=args.warmup)
    print(f"{'method':<8} {'value':>16} {'mean ms':>10} {'p50 ms':>10} {'sd ms':>8}")
    for row in rows:
        print(f"{row.method:<8} {row.value:>16.4f} {row.mean_ms:>10.3f} {row.p50_ms:>10.3f} {row.stddev_ms:>8.3f}")

    if args.json_out:
        outpath = Path(args.json_out)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "config": {"size": args.size, "repeats": args.repeats, "warmup": args.warmup, "seed": args.seed},
            "host": host_metadata(),
            "cpu_affinity": affinity_info,
            "results": [asdict(row) for row in rows],
        }
        outpath.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON benchmark output: {outpath}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
