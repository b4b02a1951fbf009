"""Initialization strategies for clustering algorithms."""

from .stride import StrideInit
from .from_previous import FromPreviousInit

__all__ = [
    'StrideInit',
    'FromPreviousInit'
]
