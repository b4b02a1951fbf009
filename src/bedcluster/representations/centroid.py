"""
Centroid representation for K-means clustering.

The simplest cluster representation - just a mean profile.
"""

from typing import Dict
import torch
from torch import Tensor

from .base_representation import BaseRepresentation


class CentroidRepresentation(BaseRepresentation):
    """Cluster represented by a single centroid profile."""

    def distance_to_point(self, points: Tensor) -> Tensor:
        """Compute squared Euclidean distance from points to centroid.

        Args:
            points: (n, d) tensor of data points

        Returns:
            (n,) tensor of squared Euclidean distances
        """
        self._check_points_shape(points)

        diff = points - self._mean.unsqueeze(0)
        return torch.sum(diff * diff, dim=1)

    def update_from_sums(self, total: Tensor, count: int) -> None:
        """Set the centroid to the mean of its members.

        With no members the centroid becomes the (all-zero) accumulator
        itself rather than keeping its previous position or being reseeded.

        Args:
            total: (d,) vector sum of the assigned points
            count: Number of assigned points
        """
        if count:
            self.mean = total / count
        else:
            self.mean = total.clone()

    def get_parameters(self) -> Dict[str, Tensor]:
        """Return parameters defining this centroid."""
        return {'mean': self._mean.clone()}

    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Set centroid parameters."""
        if 'mean' in params:
            self.mean = params['mean']

    def __repr__(self) -> str:
        return f"CentroidRepresentation(dimension={self._dimension}, mean_norm={self._mean.norm():.3f})"
