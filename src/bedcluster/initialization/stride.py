"""
Fixed-stride initialization.

Picks evenly strided rows of the active matrix as initial centroids. No
randomness is involved, so a given matrix always seeds the same way.
"""

from typing import List
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..representations.centroid import CentroidRepresentation
from ..utils.validation import check_n_clusters


class StrideInit(InitializationStrategy):
    """Seed centroid i with active row ``i * (n // k)``.

    When k does not divide n the stride rounds down, so the seeds are biased
    toward the start of the matrix and the tail rows are never picked.
    Callers wanting a different spread should reorder rows beforehand.
    """

    def initialize(self, points: Tensor, n_clusters: int,
                  **kwargs) -> List[ClusterRepresentation]:
        """Initialize clusters from strided rows.

        Args:
            points: (n, d) active rows
            n_clusters: Number of clusters

        Returns:
            List of initialized CentroidRepresentations
        """
        n_points, dimension = points.shape
        check_n_clusters(n_clusters, n_points)

        stride = n_points // n_clusters
        representations = []
        for i in range(n_clusters):
            rep = CentroidRepresentation(dimension, points.device, points.dtype)
            rep.mean = points[i * stride].clone()
            representations.append(rep)

        return representations

    def seed_indices(self, n_points: int, n_clusters: int) -> List[int]:
        """Row indices ``initialize`` would pick for the given sizes."""
        check_n_clusters(n_clusters, n_points)
        stride = n_points // n_clusters
        return [i * stride for i in range(n_clusters)]
