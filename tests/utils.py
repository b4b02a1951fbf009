# tests/utils.py
"""
Small, reusable helpers used across the bedcluster test suite.

Functions:
- assert_grouped(labels): excluded rows first, then non-decreasing labels.
- labels_equal_up_to_perm(y1, y2, K): compare labelings modulo renaming.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import itertools
import json
import time
from contextlib import contextmanager
from typing import Any, Dict, Sequence

import numpy as np
import torch


def _as_list(labels: Any) -> list:
    if isinstance(labels, torch.Tensor):
        return labels.tolist()
    return list(np.asarray(labels).tolist())


def assert_grouped(labels: Any) -> None:
    """Excluded (-1) rows come first and labels never decrease."""
    values = _as_list(labels)
    n_excluded = sum(1 for v in values if v == -1)
    assert all(v == -1 for v in values[:n_excluded]), f"-1 rows not leading: {values}"
    rest = values[n_excluded:]
    assert all(v >= 0 for v in rest), f"unexpected negative label: {values}"
    assert rest == sorted(rest), f"labels not grouped: {values}"


def labels_equal_up_to_perm(y1: Sequence[int], y2: Sequence[int], K: int) -> bool:
    """Return True if y2 can be relabeled to equal y1 exactly."""
    y1 = np.asarray(_as_list(y1))
    y2 = np.asarray(_as_list(y2))
    for perm in itertools.permutations(range(K)):
        mapping = np.array(perm)
        if np.array_equal(y1, mapping[y2]):
            return True
    return False


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Output
    ------
    [timing] fit {"n":400,"m":50,"K":3} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"))
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
