#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Iterable

# Wall-clock measurements differ between otherwise identical runs.
VOLATILE_KEYS = frozenset({"runtimeMs"})


def load_json(path: Path) -> Any:
    """Read a JSON file and return the parsed value."""
    with path.open() as f:
        return json.load(f)


def approx_equal(a: float, b: float, tol: float = 1e-12) -> bool:
    """Helper for float comparisons that tolerates tiny rounding noise."""
    return abs(a - b) <= tol * max(1.0, abs(a), abs(b))


def compare_values(label: str, lhs: Any, rhs: Any, ignore: Iterable[str] = VOLATILE_KEYS) -> None:
    """Walk two decoded JSON documents and raise on the first difference."""
    ignore = frozenset(ignore)
    if isinstance(lhs, dict) and isinstance(rhs, dict):
        compare_dicts(label, lhs, rhs, ignore)
        return
    if isinstance(lhs, list) and isinstance(rhs, list):
        if len(lhs) != len(rhs):
            raise AssertionError(f"{label} length mismatch: {len(lhs)} vs {len(rhs)}")
        for idx, (left, right) in enumerate(zip(lhs, rhs)):
            compare_values(f"{label}[{idx}]", left, right, ignore)
        return
    if isinstance(lhs, float) or isinstance(rhs, float):
        if not isinstance(lhs, (int, float)) or not isinstance(rhs, (int, float)):
            raise AssertionError(f"{label} mismatch: {lhs!r} vs {rhs!r}")
        if not approx_equal(float(lhs), float(rhs)):
            raise AssertionError(f"{label} mismatch: {lhs} vs {rhs}")
        return
    if lhs != rhs:
        raise AssertionError(f"{label} mismatch: {lhs!r} vs {rhs!r}")


def compare_dicts(label: str, lhs: Dict[str, Any], rhs: Dict[str, Any], ignore: frozenset) -> None:
    """Check that two records carry the same keys and matching values."""
    lhs_keys = set(lhs) - ignore
    rhs_keys = set(rhs) - ignore
    if lhs_keys != rhs_keys:
        missing = sorted(lhs_keys ^ rhs_keys)
        raise AssertionError(f"{label} keys differ: {missing}")
    for key in sorted(lhs_keys):
        compare_values(f"{label}.{key}", lhs[key], rhs[key], ignore)


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare two JSON outputs from the oddly runners.")
    parser.add_argument("--lhs", required=True, help="Path to the first JSON output.")
    parser.add_argument("--rhs", required=True, help="Path to the second JSON output.")
    args = parser.parse_args()

    compare_values("root", load_json(Path(args.lhs)), load_json(Path(args.rhs)))

    print("Outputs match for all comparable fields.")


if __name__ == "__main__":
    main()
