# tests/test_initialization.py
"""
Deterministic seeding strategies.
"""

from __future__ import annotations

import numpy as np
import pytest
import torch

from bedcluster.base import ClusterState
from bedcluster.initialization import StrideInit, FromPreviousInit
from bedcluster.representations import CentroidRepresentation


def _points(n: int, d: int = 2) -> torch.Tensor:
    return torch.arange(n * d, dtype=torch.float64).reshape(n, d)


def test_stride_picks_evenly_spaced_rows():
    X = _points(6)
    reps = StrideInit().initialize(X, 2)
    assert [r.mean.tolist() for r in reps] == [X[0].tolist(), X[3].tolist()]
    assert all(isinstance(r, CentroidRepresentation) for r in reps)


def test_stride_rounds_down_when_k_does_not_divide():
    # 7 // 3 == 2, so the last row is never a seed
    assert StrideInit().seed_indices(7, 3) == [0, 2, 4]
    assert StrideInit().seed_indices(5, 5) == [0, 1, 2, 3, 4]
    assert StrideInit().seed_indices(5, 1) == [0]


def test_stride_seeds_are_copies():
    X = _points(4)
    reps = StrideInit().initialize(X, 2)
    X[0, 0] = 99.0
    assert reps[0].mean[0].item() == 0.0


def test_stride_is_deterministic():
    X = _points(9, 3)
    a = StrideInit().initialize(X, 3)
    b = StrideInit().initialize(X, 3)
    for ra, rb in zip(a, b):
        assert torch.equal(ra.mean, rb.mean)


@pytest.mark.parametrize("k", [0, -2, 5])
def test_stride_rejects_bad_k(k):
    with pytest.raises(ValueError):
        StrideInit().initialize(_points(4), k)


def test_from_previous_tensor_and_ndarray():
    X = _points(5)
    centers = np.array([[1.0, 1.0], [7.0, 7.0]])
    for init in (FromPreviousInit(centers), FromPreviousInit(torch.from_numpy(centers))):
        reps = init.initialize(X, 2)
        assert [r.mean.tolist() for r in reps] == centers.tolist()
        assert reps[0].mean.dtype == torch.float64


def test_from_previous_cluster_state():
    state = ClusterState(means=torch.tensor([[0.0, 1.0], [2.0, 3.0]], dtype=torch.float64),
                         n_clusters=2, dimension=2)
    reps = FromPreviousInit(state).initialize(_points(4), 2)
    assert reps[1].mean.tolist() == [2.0, 3.0]


def test_from_previous_representations():
    rep = CentroidRepresentation(2, torch.device("cpu"))
    rep.mean = torch.tensor([5.0, 5.0], dtype=torch.float64)
    reps = FromPreviousInit([rep]).initialize(_points(3), 1)
    assert reps[0].mean.tolist() == [5.0, 5.0]
    assert reps[0] is not rep


@pytest.mark.parametrize("centers", [
    torch.zeros(3, 2),          # wrong k
    torch.zeros(2, 3),          # wrong dimension
    torch.zeros(2),             # not 2D
])
def test_from_previous_shape_errors(centers):
    with pytest.raises(ValueError):
        FromPreviousInit(centers).initialize(_points(4), 2)


def test_from_previous_rejects_non_finite():
    centers = torch.tensor([[0.0, float("nan")], [1.0, 1.0]])
    with pytest.raises(ValueError):
        FromPreviousInit(centers).initialize(_points(4), 2)


def test_from_previous_unknown_type():
    with pytest.raises(TypeError):
        FromPreviousInit("centers").initialize(_points(4), 2)
