"""Visualization utilities for clustering results."""

from .heatmap import plot_cluster_heatmap

__all__ = [
    'plot_cluster_heatmap'
]
