"""
Summary metrics over clustered signal matrices.
"""

from typing import Dict, Tuple
import torch
from torch import Tensor


def inertia(X: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Compute sum of squared distances to assigned centers (inertia).

    Rows labeled -1 (excluded) do not contribute.

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers

    Returns:
        Total inertia (lower is better)
    """
    total = 0.0
    n_clusters = centers.shape[0]

    for k in range(n_clusters):
        mask = labels == k
        if mask.sum() > 0:
            cluster_points = X[mask]
            distances = torch.sum((cluster_points - centers[k]) ** 2, dim=1)
            total += distances.sum().item()

    return total


def cluster_spans(labels: Tensor) -> Dict[int, Tuple[int, int]]:
    """Half-open row ranges occupied by each label in a sorted matrix.

    Args:
        labels: (n,) labels of a matrix already grouped by label

    Returns:
        Mapping label -> (start, stop), in row order

    Raises:
        ValueError: If a label occurs in more than one block
    """
    spans: Dict[int, Tuple[int, int]] = {}
    values = labels.tolist()
    start = 0
    for i in range(1, len(values) + 1):
        if i == len(values) or values[i] != values[start]:
            label = values[start]
            if label in spans:
                raise ValueError(f"Label {label} is not contiguous; "
                                 f"sort the matrix by label first")
            spans[label] = (start, i)
            start = i
    return spans
