"""
Core interfaces for the bedcluster engine.

This module defines the abstract base classes the engine components implement,
so the clustering loop can be written once against a consistent API.
"""

from abc import ABC, abstractmethod
from typing import Tuple, Dict, Any, Sequence, TYPE_CHECKING
import torch
from torch import Tensor

if TYPE_CHECKING:
    from .data_structures import PerBaseMatrix


class ClusterRepresentation(ABC):
    """Abstract base class for cluster representations."""

    @abstractmethod
    def distance_to_point(self, points: Tensor) -> Tensor:
        """Compute distance/cost from points to this cluster representation.

        Args:
            points: (n, d) tensor of data points

        Returns:
            (n,) tensor of distances/costs
        """
        pass

    @abstractmethod
    def update_from_sums(self, total: Tensor, count: int) -> None:
        """Update cluster parameters from accumulated member statistics.

        Args:
            total: (d,) vector sum of the assigned points
            count: Number of assigned points
        """
        pass

    @abstractmethod
    def get_parameters(self) -> Dict[str, Tensor]:
        """Return all parameters defining this cluster representation."""
        pass

    @abstractmethod
    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Set cluster parameters from dictionary."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Ambient dimension of the data."""
        pass

    @abstractmethod
    def to(self, device: torch.device) -> 'ClusterRepresentation':
        """Move representation to specified device."""
        pass


class AssignmentStrategy(ABC):
    """Abstract base class for point-to-cluster assignment strategies."""

    @abstractmethod
    def compute_assignments(self, points: Tensor,
                          representations: list[ClusterRepresentation],
                          **kwargs) -> Tuple[Tensor, Dict[str, Any]]:
        """Compute cluster assignments for points.

        Args:
            points: (n, d) tensor of data points
            representations: List of K cluster representations
            **kwargs: Strategy-specific parameters

        Returns:
            Tuple of (n,) hard assignments and an auxiliary info dict
        """
        pass


class InitializationStrategy(ABC):
    """Abstract base class for cluster initialization strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                  **kwargs) -> list[ClusterRepresentation]:
        """Initialize cluster representations.

        Args:
            points: (n, d) tensor of active data points
            n_clusters: Number of clusters to initialize
            **kwargs: Strategy-specific parameters

        Returns:
            List of initialized cluster representations
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, points: Tensor,
                representations: list[ClusterRepresentation],
                assignments: Tensor) -> Tensor:
        """Compute objective function value.

        Args:
            points: (n, d) tensor of data points
            representations: List of cluster representations
            assignments: (n,) hard cluster assignments

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass


class MatrixLoader(ABC):
    """Source of per-base signal matrices.

    Implementations read interval and signal files; the engine only sees the
    resulting container.
    """

    @abstractmethod
    def load(self, regions: Sequence[Any]) -> 'PerBaseMatrix':
        """Build a matrix with one row per region.

        Args:
            regions: Regions to extract signal over, all of the same width

        Returns:
            PerBaseMatrix whose descriptors carry the regions as identity
        """
        pass
