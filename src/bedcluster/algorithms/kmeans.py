"""
K-means clustering of per-base signal profiles.

Lloyd iterations with deterministic fixed-stride seeding, stopping when the
sum of squared distances stops moving by more than a tolerance.
"""

from typing import Optional, List, Union
import numpy as np
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.data_structures import PerBaseMatrix, ClusterState
from ..base.interfaces import ClusterRepresentation, ClusteringObjective
from ..assignments.hard import HardAssignment
from ..initialization.stride import StrideInit
from ..initialization.from_previous import FromPreviousInit
from ..utils.convergence import ChangeInError
from ..utils.validation import validate_matrix, check_n_clusters


class KMeansObjective(ClusteringObjective):
    """K-means objective: sum of squared distances to centroids."""

    def compute(self, points: Tensor, representations: List[ClusterRepresentation],
                assignments: Tensor) -> Tensor:
        """Compute within-cluster sum of squares."""
        total = torch.zeros((), dtype=points.dtype, device=points.device)

        for k, rep in enumerate(representations):
            cluster_points_mask = (assignments == k)
            if cluster_points_mask.any():
                total = total + rep.distance_to_point(points[cluster_points_mask]).sum()

        return total

    @property
    def minimize(self) -> bool:
        return True


class KMeans(BaseClusteringAlgorithm):
    """K-means over the rows of a PerBaseMatrix.

    Construction takes ownership of the matrix and moves rows holding an
    undefined value to the front (label -1). ``fit`` clusters the remaining
    rows and leaves the matrix grouped by ascending label.

    Parameters
    ----------
    matrix : PerBaseMatrix
        Signal matrix, one region per row
    n_clusters : int
        Number of clusters, at most the number of rows without NaN
    init : str or array-like, default='stride'
        Initialization method:
        - 'stride' : rows at a fixed stride through the active range
        - array of shape (n_clusters, n_columns) : use as initial centers
    tol : float, default=1e-4
        Stop when the error changes by no more than this
    max_iter : int or None, default=10000
        Iteration cap; None lets the loop run until convergence
    verbose : int, default=0
        Verbosity level
    device : str or torch.device, optional
        Device for computation (CPU when omitted)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_columns)
        Final centroids
    cluster_sizes_ : Tensor of shape (n_clusters,)
        Members per cluster in the last iteration
    labels_ : Tensor of shape (n_rows,)
        Labels aligned with the regrouped matrix
    inertia_ : float
        Error of the last iteration
    n_iter_ : int
        Number of iterations run
    num_excluded : int
        Rows set aside for holding undefined values

    Examples
    --------
    >>> matrix = PerBaseMatrix.from_array([[0, 0], [0, 1], [10, 10], [10, 11]])
    >>> with KMeans(matrix, n_clusters=2) as km:
    ...     _ = km.fit(tol=1e-6)
    ...     km.labels_.tolist()
    [0, 0, 1, 1]
    """

    def __init__(self,
                 matrix: PerBaseMatrix,
                 n_clusters: int,
                 init: Union[str, Tensor, np.ndarray, ClusterState, list] = 'stride',
                 tol: float = 1e-4,
                 max_iter: Optional[int] = 10000,
                 verbose: int = 0,
                 device: Optional[Union[str, torch.device]] = None):
        """Initialize K-means algorithm."""
        self.init = init
        super().__init__(
            matrix,
            n_clusters=n_clusters,
            tol=tol,
            max_iter=max_iter,
            verbose=verbose,
            device=device
        )

    def _create_components(self) -> None:
        """Create K-means specific components."""
        self.assignment_strategy = HardAssignment()

        if isinstance(self.init, str):
            self.initialization_strategy = StrideInit()
        else:
            self.initialization_strategy = FromPreviousInit(self.init)

        self.convergence_criterion = ChangeInError(tol=self.tol)
        self.objective = KMeansObjective()

    def _check_init(self, init, n_clusters: int):
        """Check an init option against K and the matrix width.

        Returns the option with array-likes converted to a tensor.
        """
        if isinstance(init, str):
            if init != 'stride':
                raise ValueError(f"Unknown init method: {init}")
            return init

        if isinstance(init, ClusterState):
            shape = (init.n_clusters, init.dimension)
        elif isinstance(init, list) and init and all(
                isinstance(rep, ClusterRepresentation) for rep in init):
            dims = {rep.dimension for rep in init}
            shape = (len(init), dims.pop() if len(dims) == 1 else -1)
        else:
            init = validate_matrix(init, allow_nan=False)
            shape = tuple(init.shape)

        if shape != (n_clusters, self.dimension):
            raise ValueError(f"Initial centers have shape {shape}, expected "
                             f"({n_clusters}, {self.dimension})")
        return init

    def _check_config(self) -> None:
        self.init = self._check_init(self.init, self.n_clusters)

    def _create_representations(self, data: Tensor) -> List[ClusterRepresentation]:
        """Create centroid representations."""
        return self.initialization_strategy.initialize(data, self.n_clusters)

    def fit_predict(self, tol: Optional[float] = None) -> Tensor:
        """Fit and return labels aligned with the regrouped matrix."""
        self.fit(tol)
        return self.labels_

    def score(self, X: Union[Tensor, np.ndarray, list]) -> float:
        """Opposite of the K-means objective of X under the fitted centroids.

        Rows holding a NaN are ignored.
        """
        labels = self.predict(X).to(self.device)
        X = validate_matrix(X, device=self.device)
        defined = labels >= 0
        value = self.objective.compute(X[defined], self.representations, labels[defined])
        return -value.item()

    def get_params(self, deep: bool = True):
        params = super().get_params(deep)
        params['init'] = self.init
        return params

    def set_params(self, **params) -> 'KMeans':
        """Set parameters; ``init`` is checked against the new K."""
        init = params.pop('init', self.init)
        n_clusters = params.get('n_clusters', self.n_clusters)
        check_n_clusters(n_clusters, self.n_rows - self.num_excluded)
        init = self._check_init(init, int(n_clusters))
        super().set_params(**params)
        self.init = init
        return self
