"""
Hard assignment strategy.

Assigns each row to its nearest centroid.
"""

from typing import List, Tuple, Dict, Any
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, ClusterRepresentation


class HardAssignment(AssignmentStrategy):
    """Hard (discrete) assignment to nearest cluster.

    Ties go to the lowest cluster index: a later cluster only wins when it is
    strictly closer.
    """

    def compute_assignments(self, points: Tensor,
                          representations: List[ClusterRepresentation],
                          **kwargs) -> Tuple[Tensor, Dict[str, Any]]:
        """Assign each point to nearest cluster.

        Args:
            points: (n, d) data points
            representations: List of K cluster representations
            **kwargs: Ignored

        Returns:
            assignments: (n,) cluster indices
            info: {'distances': (n, K), 'min_distances': (n,)}
        """
        n_points = points.shape[0]
        n_clusters = len(representations)

        distances = torch.zeros(n_points, n_clusters, device=points.device,
                                dtype=points.dtype)
        for k, representation in enumerate(representations):
            distances[:, k] = representation.distance_to_point(points)

        # argmin reports the first minimal index
        assignments = torch.argmin(distances, dim=1)
        min_distances = torch.gather(distances, 1, assignments.unsqueeze(1)).squeeze(1)

        return assignments, {'distances': distances, 'min_distances': min_distances}
