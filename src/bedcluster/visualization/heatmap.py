"""
Heatmap rendering of clustered signal matrices.

Draws the regrouped matrix one row per region, with a color bar marking each
row's cluster and lines between cluster blocks.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import numpy as np

from ..base.data_structures import PerBaseMatrix, EXCLUDED_LABEL
from ..utils.metrics import cluster_spans


def _block_name(label: int) -> str:
    if label == EXCLUDED_LABEL:
        return 'NA'
    if label < 0:
        return 'unlabeled'
    return f'Cluster {label}'


def plot_cluster_heatmap(data: Union[PerBaseMatrix, Tensor, np.ndarray],
                         labels: Optional[Tensor] = None,
                         ax: Optional[plt.Axes] = None,
                         cmap: str = 'viridis',
                         show_boundaries: bool = True,
                         show_label_bar: bool = True,
                         vmin: Optional[float] = None,
                         vmax: Optional[float] = None,
                         title: Optional[str] = None) -> plt.Axes:
    """Plot a matrix grouped by cluster as a heatmap.

    Args:
        data: Regrouped PerBaseMatrix, or an (n, m) array of rows
        labels: (n,) labels; read from the matrix when data is a PerBaseMatrix
        ax: Matplotlib axes (created if None)
        cmap: Colormap for signal values
        show_boundaries: Draw a line between consecutive cluster blocks
        show_label_bar: Draw a strip left of the heatmap colored by label
        vmin: Lower bound of the color scale
        vmax: Upper bound of the color scale
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if isinstance(data, PerBaseMatrix):
        if labels is None:
            labels = data.labels
        values = data.matrix.cpu().numpy()
    elif isinstance(data, Tensor):
        values = data.detach().cpu().numpy()
    else:
        values = np.asarray(data, dtype=float)

    if values.ndim != 2:
        raise ValueError(f"Expected 2D data, got {values.ndim}D")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 10))

    # Undefined bases render as blank cells
    masked = np.ma.masked_invalid(values)
    n_rows, n_cols = values.shape
    image = ax.imshow(masked, aspect='auto', interpolation='nearest',
                      cmap=cmap, vmin=vmin, vmax=vmax)
    ax.figure.colorbar(image, ax=ax, label='Signal')

    if labels is not None:
        labels = torch.as_tensor(labels).cpu()
        if labels.shape != (n_rows,):
            raise ValueError(f"Expected {n_rows} labels, got {tuple(labels.shape)}")
        spans = cluster_spans(labels)

        if show_label_bar:
            defined = [lab for lab in spans if lab >= 0]
            label_cmap = plt.get_cmap('tab10' if len(defined) <= 10 else 'tab20')
            bar_width = max(1.0, n_cols * 0.02)
            for label, (start, stop) in spans.items():
                if label < 0:
                    color = 'lightgrey'
                else:
                    color = label_cmap(defined.index(label) % label_cmap.N)
                ax.add_patch(Rectangle((-0.5 - bar_width, start - 0.5),
                                       bar_width, stop - start,
                                       color=color, clip_on=False))
            ax.set_xlim(-0.5 - bar_width, n_cols - 0.5)

        if show_boundaries:
            for _, stop in list(spans.values())[:-1]:
                ax.axhline(stop - 0.5, color='white', linewidth=1)

        ax.set_yticks([(start + stop - 1) / 2 for start, stop in spans.values()])
        ax.set_yticklabels([_block_name(lab) for lab in spans])
    else:
        ax.set_ylabel('Region')

    ax.set_xlabel('Position (bp)')

    if title:
        ax.set_title(title)

    return ax
