"""
Core data structures for the bedcluster engine.

This module provides the matrix container handed to the engine (one row per
genomic region, one column per base), the per-row descriptors that travel
with it, and the records describing cluster state between iterations.
"""

from typing import Optional, List, Dict, Any, Sequence, Union
import torch
from torch import Tensor
import numpy as np
from dataclasses import dataclass, field

from ..utils.validation import validate_matrix


EXCLUDED_LABEL = -1
# Reported by PerBaseMatrix.labels for rows that were never labeled
UNSET_LABEL = -2


@dataclass(frozen=True)
class Region:
    """A BED6 interval identifying where a row's signal came from."""

    chrom: str
    start: int
    end: int
    name: str = '.'
    score: float = 0.0
    strand: str = '.'

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(eq=False)
class RowDescriptor:
    """Metadata travelling with one matrix row.

    ``data`` is a view into the owning container's buffer, never a copy.
    ``label`` is None until assigned, ``-1`` for rows holding an undefined
    value, otherwise the cluster index. ``region`` is carried through
    untouched for the caller.
    """

    data: Tensor
    region: Any = None
    label: Optional[int] = None


def _label_key(descriptor: RowDescriptor):
    # Unset labels sort after every assigned label
    if descriptor.label is None:
        return (1, 0)
    return (0, descriptor.label)


class PerBaseMatrix:
    """Row-major signal matrix with one descriptor per row.

    ``rows[i]`` is always the data of ``descriptors[i]``; every reordering
    goes through the descriptors and rebuilds ``rows`` from them.
    """

    def __init__(self, buffer: Union[Tensor, np.ndarray, list],
                 regions: Optional[Sequence[Any]] = None):
        """
        Args:
            buffer: (nrow, ncol) signal values; NaN marks an undefined base
            regions: Optional identity per row (defaults to the row index)
        """
        buffer = validate_matrix(buffer)
        nrow = buffer.shape[0]

        if regions is None:
            regions = list(range(nrow))
        elif len(regions) != nrow:
            raise ValueError(f"Got {len(regions)} regions for {nrow} rows")

        self._buffer = buffer
        self._nrow, self._ncol = buffer.shape
        self._descriptors = [
            RowDescriptor(data=buffer[i], region=region)
            for i, region in enumerate(regions)
        ]
        self._rows = [d.data for d in self._descriptors]
        self._closed = False

    @classmethod
    def from_array(cls, values: Union[Tensor, np.ndarray, list],
                   regions: Optional[Sequence[Any]] = None) -> 'PerBaseMatrix':
        """Build a container from any array-like of row profiles."""
        return cls(values, regions=regions)

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("PerBaseMatrix has been closed")

    @property
    def nrow(self) -> int:
        return self._nrow

    @property
    def ncol(self) -> int:
        return self._ncol

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def buffer(self) -> Tensor:
        """Backing storage in load order; rows point into it."""
        self._check_open()
        return self._buffer

    @property
    def rows(self) -> List[Tensor]:
        self._check_open()
        return self._rows

    @property
    def descriptors(self) -> List[RowDescriptor]:
        self._check_open()
        return self._descriptors

    @property
    def device(self) -> torch.device:
        self._check_open()
        return self._buffer.device

    @property
    def matrix(self) -> Tensor:
        """(nrow, ncol) tensor of the rows in their current order."""
        self._check_open()
        return torch.stack(self._rows)

    @property
    def labels(self) -> Tensor:
        """(nrow,) labels in current order; unset rows read as UNSET_LABEL."""
        self._check_open()
        return torch.tensor(
            [UNSET_LABEL if d.label is None else d.label for d in self._descriptors],
            dtype=torch.long
        )

    @property
    def regions(self) -> List[Any]:
        self._check_open()
        return [d.region for d in self._descriptors]

    def undefined_mask(self) -> Tensor:
        """(nrow,) boolean mask of rows holding at least one NaN."""
        return torch.isnan(self.matrix).any(dim=1)

    def mark_undefined_rows(self) -> int:
        """Label every row holding an undefined value as excluded.

        Labels left on the other rows by an earlier run are cleared.

        Returns:
            Number of rows marked
        """
        mask = self.undefined_mask()
        for descriptor, undefined in zip(self._descriptors, mask.tolist()):
            descriptor.label = EXCLUDED_LABEL if undefined else None
        return int(mask.sum().item())

    def sort_by_label(self) -> None:
        """Stable ascending sort of rows and descriptors keyed on label."""
        self._check_open()
        pairs = sorted(zip(self._descriptors, self._rows),
                       key=lambda pair: _label_key(pair[0]))
        self._descriptors = [descriptor for descriptor, _ in pairs]
        self._rows = [descriptor.data for descriptor in self._descriptors]

    def close(self) -> None:
        """Release the buffer and descriptors. Safe to call repeatedly."""
        if self._closed:
            return
        self._buffer = None
        self._rows = None
        self._descriptors = None
        self._closed = True

    def __len__(self) -> int:
        return self._nrow

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f"PerBaseMatrix(nrow={self._nrow}, ncol={self._ncol}, {state})"


@dataclass
class ClusterState:
    """Container for the parameters defining all clusters at one iteration."""

    means: Tensor  # (K, d) centroids
    n_clusters: int
    dimension: int
    cluster_sizes: Optional[Tensor] = None  # (K,) member counts

    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate dimensions and set derived attributes."""
        assert self.means.shape == (self.n_clusters, self.dimension)

        if self.cluster_sizes is None:
            self.cluster_sizes = torch.zeros(self.n_clusters, dtype=torch.long,
                                             device=self.means.device)

    @property
    def device(self) -> torch.device:
        """Device where tensors are stored."""
        return self.means.device

    def to(self, device: torch.device) -> 'ClusterState':
        """Move all tensors to specified device."""
        return ClusterState(
            means=self.means.to(device),
            n_clusters=self.n_clusters,
            dimension=self.dimension,
            cluster_sizes=self.cluster_sizes.to(device),
            metadata=self.metadata.copy()
        )

    @property
    def empty_clusters(self) -> List[int]:
        """Indices of clusters that received no members."""
        return torch.nonzero(self.cluster_sizes == 0).flatten().tolist()


@dataclass
class AlgorithmState:
    """Record of a single clustering iteration."""

    iteration: int
    error: float
    cluster_sizes: Tensor
    n_changed: int
    metadata: Dict[str, Any] = field(default_factory=dict)
