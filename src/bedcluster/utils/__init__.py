"""Utility functions for bedcluster."""

from .convergence import ChangeInError, INITIAL_ERROR

from .metrics import (
    inertia,
    cluster_spans
)

from .validation import (
    validate_matrix,
    check_n_clusters,
    check_tolerance,
    check_max_iter
)

from .device import (
    get_default_device,
    parse_device
)

__all__ = [
    # Convergence criteria
    'ChangeInError',
    'INITIAL_ERROR',

    # Metrics
    'inertia',
    'cluster_spans',

    # Validation
    'validate_matrix',
    'check_n_clusters',
    'check_tolerance',
    'check_max_iter',

    # Device management
    'get_default_device',
    'parse_device'
]
