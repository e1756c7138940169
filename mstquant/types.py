"""Core types for the MST quantization pipeline."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import warnings

import numpy as np

# Type aliases
ImageArray = np.ndarray
Color = Tuple[int, int, int]


@dataclass
class DistinctColors:
    """Distinct colors of an image in first-occurrence (row-major) order.

    The position of a color in ``colors`` is its color id.
    """
    colors: np.ndarray  # (D, 3) uint8
    keys: np.ndarray    # (D,) packed 24-bit keys

    def __len__(self) -> int:
        return int(self.colors.shape[0])


@dataclass
class SpanningTree:
    """Minimum spanning tree stored as parent pointers.

    Color id 0 is the root: parent 0, cost 0.
    """
    parents: np.ndarray  # (D,) int
    costs: np.ndarray    # (D,) float64, weight of the edge to the parent

    @property
    def size(self) -> int:
        return int(self.parents.shape[0])

    @property
    def edge_count(self) -> int:
        return max(self.size - 1, 0)

    @property
    def total_weight(self) -> float:
        return float(np.sum(self.costs))


@dataclass
class ClusterAssignment:
    """Partition of color ids into clusters."""
    labels: np.ndarray            # (D,) cluster id per color id
    members: List[List[int]]      # color ids per cluster id

    @property
    def n_clusters(self) -> int:
        return len(self.members)


@dataclass
class RemapTable:
    """Packed color key -> palette color, sized to the distinct colors."""
    keys: np.ndarray    # (D,) sorted packed keys
    colors: np.ndarray  # (D, 3) uint8 replacement color for each key

    def __len__(self) -> int:
        return int(self.keys.shape[0])


@dataclass
class Diagnostics:
    """Non-authoritative run statistics."""
    distinct_colors: int = 0
    mst_weight: float = 0.0
    n_clusters: int = 0
    timings: Dict[str, float] = field(default_factory=dict)
    elapsed: float = 0.0


@dataclass
class QuantizationResult:
    """Result of one quantization run."""
    image: ImageArray
    palette: np.ndarray
    assignment: Optional[ClusterAssignment]
    diagnostics: Diagnostics
    smoothed: Optional[ImageArray] = None


@dataclass
class QuantizeConfig:
    """Configuration for the quantization pipeline."""
    # Palette size (K)
    n_colors: int = 16

    # Optional Gaussian pre-smoothing
    smooth: bool = False
    filter_size: int = 5
    sigma: float = 1.0

    # Debug output
    save_stages: Optional[Path] = None

    def __post_init__(self):
        if self.smooth and self.filter_size % 2 == 0:
            warnings.warn(
                f"filter_size should be odd, got {self.filter_size}. "
                f"It will be rounded up to {self.filter_size + 1}."
            )
        if self.save_stages is not None:
            self.save_stages = Path(self.save_stages)


class QuantizationError(Exception):
    """Base exception for quantization errors."""
    pass


class InvalidConfigurationError(QuantizationError):
    """Requested palette size is outside 1 <= K <= D."""

    def __init__(self, requested: int, distinct: Optional[int] = None):
        self.requested = requested
        self.distinct = distinct
        if distinct is None:
            message = f"n_colors must be an integer >= 1, got {requested!r}"
        else:
            message = (
                f"n_colors must be between 1 and the number of distinct "
                f"colors ({distinct}), got {requested}"
            )
        super().__init__(message)


class ImpossiblePartitionError(QuantizationError):
    """The spanning tree cannot be cut into the requested number of clusters."""

    def __init__(self, requested: int, distinct: int, message: Optional[str] = None):
        self.requested = requested
        self.distinct = distinct
        super().__init__(
            message
            or f"Cannot split {distinct} colors into {requested} clusters"
        )


class QuantizationCancelled(QuantizationError):
    """Raised when the caller's cancellation signal is observed."""

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"Quantization cancelled before stage '{stage}'")


class RemapError(QuantizationError):
    """A pixel color is missing from the remap table."""
    pass
