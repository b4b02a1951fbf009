"""
Base class for clustering engines over per-base signal matrices.

Provides the common skeleton: take ownership of a matrix, push rows with
undefined values out of the way, alternate assignment and update steps until
the error settles, then write labels back and regroup the matrix by cluster.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Sequence, Union
import itertools
import time
import warnings
import numpy as np
import torch
from torch import Tensor

from .interfaces import (
    ClusterRepresentation, AssignmentStrategy, InitializationStrategy,
    ConvergenceCriterion, ClusteringObjective, MatrixLoader
)
from .data_structures import (
    PerBaseMatrix, ClusterState, AlgorithmState, EXCLUDED_LABEL
)
from ..utils.device import parse_device
from ..utils.validation import (
    validate_matrix, check_n_clusters, check_tolerance, check_max_iter
)


class ConvergenceWarning(UserWarning):
    """The iteration cap stopped the loop before the error settled."""


class BaseClusteringAlgorithm:
    """Base class implementing the alternating optimization framework.

    The engine owns its PerBaseMatrix from construction until ``close()``.
    Construction moves rows holding a NaN to the front, labeled -1; only the
    rows after them (the active range) take part in clustering.

    Subclasses need to specify:
    - Assignment strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function
    """

    def __init__(self,
                 matrix: PerBaseMatrix,
                 n_clusters: int,
                 tol: float = 1e-4,
                 max_iter: Optional[int] = 10000,
                 verbose: int = 0,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            matrix: Signal matrix; ownership passes to the engine
            n_clusters: Number of clusters K
            tol: Convergence tolerance on the change in error
            max_iter: Iteration cap (None for no cap)
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            device: Torch device for the computation (None for CPU)

        Raises:
            ValueError: If n_clusters exceeds the rows without undefined
                values; the matrix is left untouched in that case
        """
        if not isinstance(matrix, PerBaseMatrix):
            raise TypeError(f"Expected PerBaseMatrix, got {type(matrix)}")
        if matrix.closed:
            raise ValueError("Cannot cluster a closed PerBaseMatrix")

        n_undefined = int(matrix.undefined_mask().sum().item())
        check_n_clusters(n_clusters, matrix.nrow - n_undefined)

        self.n_clusters = int(n_clusters)
        self.tol = check_tolerance(tol)
        self.max_iter = check_max_iter(max_iter)
        self.verbose = verbose
        self.device = parse_device(device)

        self.n_rows = matrix.nrow
        self.dimension = matrix.ncol
        self._check_config()

        self.matrix = matrix
        self.num_excluded = self._exclude_undefined_rows()

        # These will be set by subclasses
        self.representations: Optional[List[ClusterRepresentation]] = None
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Algorithm state
        self.fitted_ = False
        self.converged_ = False
        self.n_iter_ = 0
        self.history_: List[AlgorithmState] = []
        self.cluster_sizes_: Optional[Tensor] = None
        self._closed = False

    @classmethod
    def from_regions(cls, loader: MatrixLoader, regions: Sequence[Any],
                     n_clusters: int, **kwargs) -> 'BaseClusteringAlgorithm':
        """Build the matrix through ``loader`` and wrap it in an engine.

        Args:
            loader: Produces a PerBaseMatrix for the regions
            regions: Regions to load, all of the same width
            n_clusters: Number of clusters K
            **kwargs: Forwarded to the constructor

        Returns:
            Engine owning the loaded matrix
        """
        matrix = loader.load(regions)
        return cls(matrix, n_clusters, **kwargs)

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    @abstractmethod
    def _create_representations(self, data: Tensor) -> List[ClusterRepresentation]:
        """Create initial cluster representations.

        Args:
            data: (n, d) active rows

        Returns:
            List of K cluster representations
        """
        pass

    def _check_config(self) -> None:
        """Validate subclass options before the matrix is touched."""
        pass

    def _exclude_undefined_rows(self) -> int:
        """Label rows holding a NaN -1 and move them to the front."""
        n_excluded = self.matrix.mark_undefined_rows()
        self.matrix.sort_by_label()
        return n_excluded

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Clustering engine has been closed")

    def _check_fitted(self) -> None:
        self._check_open()
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")

    def _active_rows(self) -> Tensor:
        """(n - num_excluded, d) stack of the active rows on the compute device."""
        rows = self.matrix.rows[self.num_excluded:]
        return torch.stack(rows).to(self.device)

    def fit(self, tol: Optional[float] = None) -> 'BaseClusteringAlgorithm':
        """Cluster the active rows and regroup the matrix by label.

        Args:
            tol: Convergence tolerance overriding the constructor's

        Returns:
            Self
        """
        self._check_open()
        if tol is not None:
            self.tol = check_tolerance(tol)

        X = self._active_rows()
        n_active = X.shape[0]

        self._create_components()

        if self.verbose:
            print(f"Initializing {self.n_clusters} clusters from {n_active} rows "
                  f"({self.num_excluded} excluded)...")

        start_time = time.time()
        self.representations = self._create_representations(X)

        self.n_iter_ = 0
        self.history_ = []
        self.convergence_criterion.reset()

        iterations = range(self.max_iter) if self.max_iter is not None else itertools.count()
        previous = None
        converged = False

        # Main optimization loop
        for iteration in iterations:
            iter_start_time = time.time()

            # Assignment step
            assignments, aux_info = self.assignment_strategy.compute_assignments(
                X, self.representations
            )
            error = aux_info['min_distances'].sum().item()

            # Update step
            totals = torch.zeros(self.n_clusters, self.dimension,
                                 dtype=X.dtype, device=X.device)
            totals.index_add_(0, assignments, X)
            sizes = torch.bincount(assignments, minlength=self.n_clusters)
            for k, representation in enumerate(self.representations):
                representation.update_from_sums(totals[k], int(sizes[k].item()))

            n_changed = n_active if previous is None else int((assignments != previous).sum().item())
            previous = assignments

            self.history_.append(AlgorithmState(
                iteration=iteration,
                error=error,
                cluster_sizes=sizes.cpu(),
                n_changed=n_changed
            ))
            self.n_iter_ = iteration + 1

            converged = self.convergence_criterion.check({
                'iteration': iteration,
                'error': error,
                'assignments': assignments
            })

            # Logging
            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                print(f"Iteration {iteration:3d}: error = {error:.6f} "
                      f"changed = {n_changed} ({iter_time:.3f}s)")
            if self.verbose >= 2:
                print(f"  cluster sizes: {sizes.tolist()}")
                empty = torch.nonzero(sizes == 0).flatten().tolist()
                if empty:
                    print(f"  empty clusters reset to zero: {empty}")

            if converged:
                if self.verbose:
                    print(f"Converged at iteration {iteration}")
                break

        if not converged:
            warnings.warn(f"Failed to converge after {self.max_iter} iterations",
                          ConvergenceWarning)

        self.converged_ = converged
        self.cluster_sizes_ = sizes.cpu()
        self._write_labels(assignments)
        self.fitted_ = True

        if self.verbose:
            print(f"Total fitting time: {time.time() - start_time:.3f}s")

        return self

    def _write_labels(self, assignments: Tensor) -> None:
        """Copy labels onto the active descriptors and regroup the matrix."""
        active = self.matrix.descriptors[self.num_excluded:]
        for descriptor, label in zip(active, assignments.cpu().tolist()):
            descriptor.label = label
        self.matrix.sort_by_label()

    def predict(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Assign new profiles to the nearest fitted centroid.

        Args:
            X: (n, d) profiles; rows holding a NaN get label -1

        Returns:
            (n,) tensor of cluster labels
        """
        self._check_fitted()
        X = validate_matrix(X, device=self.device)
        if X.shape[1] != self.dimension:
            raise ValueError(f"Expected {self.dimension} columns, got {X.shape[1]}")

        labels = torch.full((X.shape[0],), EXCLUDED_LABEL, dtype=torch.long)
        defined = ~torch.isnan(X).any(dim=1)
        if defined.any():
            assignments, _ = self.assignment_strategy.compute_assignments(
                X[defined], self.representations
            )
            labels[defined.cpu()] = assignments.cpu()
        return labels

    def close(self) -> None:
        """Release the matrix, centroids and counters. Safe to call repeatedly."""
        if self._closed:
            return
        if self.matrix is not None:
            self.matrix.close()
        self.matrix = None
        self.representations = None
        self.cluster_sizes_ = None
        self.history_ = []
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'BaseClusteringAlgorithm':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _extract_cluster_state(self) -> ClusterState:
        """Extract current cluster parameters into ClusterState object."""
        means = torch.stack([
            rep.get_parameters()['mean']
            for rep in self.representations
        ]).cpu()

        return ClusterState(
            means=means,
            n_clusters=len(self.representations),
            dimension=self.dimension,
            cluster_sizes=self.cluster_sizes_
        )

    @property
    def cluster_state_(self) -> ClusterState:
        """Final centroids and sizes."""
        self._check_fitted()
        return self._extract_cluster_state()

    @property
    def cluster_centers_(self) -> Tensor:
        """(K, d) final centroids."""
        self._check_fitted()
        return self._extract_cluster_state().means

    @property
    def centroids(self) -> Tensor:
        return self.cluster_centers_

    @property
    def labels_(self) -> Tensor:
        """(n,) labels aligned with the rows of the regrouped matrix."""
        self._check_fitted()
        return self.matrix.labels

    @property
    def inertia_(self) -> float:
        """Error of the last iteration."""
        self._check_fitted()
        return self.history_[-1].error

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'tol': self.tol,
            'max_iter': self.max_iter,
            'verbose': self.verbose,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility).

        ``n_clusters`` is checked against the usable rows again; takes
        effect on the next ``fit``.
        """
        for key, value in params.items():
            if key == 'n_clusters':
                check_n_clusters(value, self.n_rows - self.num_excluded)
                value = int(value)
            elif key == 'tol':
                value = check_tolerance(value)
            elif key == 'max_iter':
                value = check_max_iter(value)
            elif key == 'device':
                value = parse_device(value)
            elif key not in self.get_params():
                raise ValueError(f"Invalid parameter {key!r}")
            setattr(self, key, value)
        return self
