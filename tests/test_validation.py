import math

import numpy as np
import pytest
import torch

from bedcluster.utils.validation import (
    validate_matrix, check_n_clusters, check_tolerance, check_max_iter
)


def test_validate_matrix_converts_to_float64():
    X = validate_matrix(np.arange(6).reshape(3, 2))
    assert isinstance(X, torch.Tensor)
    assert X.dtype == torch.float64
    assert X.shape == (3, 2)


def test_validate_matrix_nan_policy():
    data = [[1.0, math.nan], [0.0, 0.0]]
    assert torch.isnan(validate_matrix(data)).any()
    with pytest.raises(ValueError, match="NaN"):
        validate_matrix(data, allow_nan=False)


@pytest.mark.parametrize("k, usable", [(0, 5), (-1, 5), (6, 5), (1, 0)])
def test_check_n_clusters_range(k, usable):
    with pytest.raises(ValueError):
        check_n_clusters(k, usable)


@pytest.mark.parametrize("k", [2.0, "2", True])
def test_check_n_clusters_type(k):
    with pytest.raises(TypeError):
        check_n_clusters(k, 5)


def test_check_n_clusters_accepts_numpy_int():
    check_n_clusters(np.int64(3), 3)


def test_check_tolerance():
    assert check_tolerance(0) == 0.0
    assert check_tolerance(1e-6) == 1e-6
    with pytest.raises(ValueError):
        check_tolerance(-1e-3)
    with pytest.raises(ValueError):
        check_tolerance(math.nan)
    with pytest.raises(TypeError):
        check_tolerance("0.1")


def test_check_max_iter():
    assert check_max_iter(None) is None
    assert check_max_iter(5) == 5
    with pytest.raises(ValueError):
        check_max_iter(0)
    with pytest.raises(TypeError):
        check_max_iter(2.5)
