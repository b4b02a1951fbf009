"""
Convergence criteria for the clustering loop.

K-means here stops on the change in its error, the sum of squared distances
from every active row to the centroid it was assigned to.
"""

import sys
from typing import Dict, Any

from ..base.interfaces import ConvergenceCriterion


# Stand-in for the error before the first iteration; no finite error is
# within any tolerance of it, so one full iteration always runs.
INITIAL_ERROR = sys.float_info.max


class ChangeInError(ConvergenceCriterion):
    """Convergence when the error moves by no more than ``tol``."""

    def __init__(self, tol: float = 1e-4):
        """
        Args:
            tol: Absolute tolerance on |error - previous error|
        """
        super().__init__()
        self.tol = tol
        self._prev_error = INITIAL_ERROR

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the error has stabilized."""
        error = current_state['error']
        change = abs(error - self._prev_error)

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'error': error,
            'change': change
        })

        self._prev_error = error
        return change <= self.tol

    def reset(self):
        """Forget the previous error."""
        super().reset()
        self._prev_error = INITIAL_ERROR
