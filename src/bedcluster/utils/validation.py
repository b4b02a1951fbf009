"""
Input validation utilities.

Provides functions for validating signal matrices and clustering parameters
before any state is created, so a bad call never leaves a half-built engine.
"""

import math
import numbers
from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np


def validate_matrix(X: Union[Tensor, np.ndarray, list],
                    dtype: torch.dtype = torch.float64,
                    device: Optional[torch.device] = None,
                    allow_nan: bool = True,
                    ensure_min_samples: int = 1,
                    ensure_min_features: int = 1) -> Tensor:
    """Validate and convert a signal matrix to a 2D tensor.

    NaN marks an undefined base and is accepted unless ``allow_nan`` is
    False; infinite values are always rejected.

    Args:
        X: Input data (tensor, numpy array, or nested list)
        dtype: Target data type
        device: Target device
        allow_nan: Whether NaN entries are permitted
        ensure_min_samples: Minimum number of rows required
        ensure_min_features: Minimum number of columns required

    Returns:
        Validated tensor

    Raises:
        TypeError: If X cannot be converted
        ValueError: If validation fails
    """
    if isinstance(X, Tensor):
        if X.dtype != dtype or (device is not None and X.device != device):
            X = X.to(dtype=dtype, device=device)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(X).to(dtype=dtype, device=device)
    elif isinstance(X, list):
        X = torch.tensor(X, dtype=dtype, device=device)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.dim() != 2:
        raise ValueError(f"Expected 2D array, got {X.dim()}D")

    n_samples, n_features = X.shape
    if n_samples < ensure_min_samples:
        raise ValueError(f"Found {n_samples} rows, but need at least "
                         f"{ensure_min_samples}")
    if n_features < ensure_min_features:
        raise ValueError(f"Found {n_features} columns, but need at least "
                         f"{ensure_min_features}")

    if not allow_nan and torch.isnan(X).any():
        raise ValueError("Input contains NaN values")
    if torch.isinf(X).any():
        raise ValueError("Input contains infinite values")

    return X


def check_n_clusters(n_clusters: int, n_usable: int) -> None:
    """Validate the number of clusters against the usable row count.

    Args:
        n_clusters: Number of clusters
        n_usable: Number of rows without undefined values

    Raises:
        TypeError: If n_clusters is not an integer
        ValueError: If n_clusters is not in [1, n_usable]
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, numbers.Integral):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise ValueError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_usable:
        raise ValueError(f"n_clusters ({n_clusters}) cannot be larger than "
                         f"the number of usable rows ({n_usable})")


def check_tolerance(tol: float) -> float:
    """Validate a convergence tolerance and return it as a float."""
    if not isinstance(tol, numbers.Real) or isinstance(tol, bool):
        raise TypeError(f"tol must be a real number, got {type(tol)}")
    tol = float(tol)
    if math.isnan(tol) or tol < 0:
        raise ValueError(f"tol must be non-negative, got {tol}")
    return tol


def check_max_iter(max_iter: Optional[int]) -> Optional[int]:
    """Validate an iteration cap; None means no cap."""
    if max_iter is None:
        return None
    if isinstance(max_iter, bool) or not isinstance(max_iter, numbers.Integral):
        raise TypeError(f"max_iter must be int or None, got {type(max_iter)}")
    if max_iter <= 0:
        raise ValueError(f"max_iter must be positive, got {max_iter}")
    return int(max_iter)
