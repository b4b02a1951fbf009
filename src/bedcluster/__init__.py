"""
bedcluster: k-means clustering of per-base genomic signal profiles.

Each row of a PerBaseMatrix is the signal over one fixed-width region. The
KMeans engine sets aside rows holding undefined values (NaN), clusters the
rest, and regroups the matrix so rows of the same cluster are contiguous,
undefined rows first.

Example usage:
    >>> import torch
    >>> from bedcluster import KMeans, PerBaseMatrix
    >>>
    >>> matrix = PerBaseMatrix.from_array(torch.rand(500, 200))
    >>> with KMeans(matrix, n_clusters=4, verbose=1) as km:
    ...     km.fit(tol=1e-4)
    ...     grouped = km.matrix.matrix
    ...     labels = km.labels_
"""

__version__ = '0.1.0'

from .algorithms.kmeans import KMeans, KMeansObjective

from .visualization import plot_cluster_heatmap

from .base import (
    Region,
    RowDescriptor,
    PerBaseMatrix,
    ClusterState,
    AlgorithmState,
    MatrixLoader,
    ConvergenceWarning,
    EXCLUDED_LABEL
)

__all__ = [
    # Algorithms
    'KMeans',
    'KMeansObjective',

    # Core data structures
    'Region',
    'RowDescriptor',
    'PerBaseMatrix',
    'ClusterState',
    'AlgorithmState',
    'MatrixLoader',
    'ConvergenceWarning',
    'EXCLUDED_LABEL',

    # Visualization
    'plot_cluster_heatmap',

    # Version
    '__version__'
]
