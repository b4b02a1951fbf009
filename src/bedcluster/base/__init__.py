"""Base classes, interfaces and containers for bedcluster."""

from .interfaces import (
    ClusterRepresentation,
    AssignmentStrategy,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective,
    MatrixLoader
)

from .data_structures import (
    Region,
    RowDescriptor,
    PerBaseMatrix,
    ClusterState,
    AlgorithmState,
    EXCLUDED_LABEL,
    UNSET_LABEL
)

from .clustering_base import BaseClusteringAlgorithm, ConvergenceWarning

__all__ = [
    # Interfaces
    'ClusterRepresentation',
    'AssignmentStrategy',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',
    'MatrixLoader',

    # Data structures
    'Region',
    'RowDescriptor',
    'PerBaseMatrix',
    'ClusterState',
    'AlgorithmState',
    'EXCLUDED_LABEL',
    'UNSET_LABEL',

    # Base algorithm
    'BaseClusteringAlgorithm',
    'ConvergenceWarning'
]
