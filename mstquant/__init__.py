"""MST color quantization package."""
from mstquant.types import (
    ClusterAssignment,
    DistinctColors,
    Diagnostics,
    QuantizationResult,
    QuantizeConfig,
    RemapTable,
    SpanningTree,
    QuantizationError,
    InvalidConfigurationError,
    ImpossiblePartitionError,
    QuantizationCancelled,
    RemapError,
)
from mstquant.pipeline import QuantizationPipeline, quantize_image

__version__ = "0.1.0"

__all__ = [
    "ClusterAssignment",
    "DistinctColors",
    "Diagnostics",
    "QuantizationResult",
    "QuantizeConfig",
    "RemapTable",
    "SpanningTree",
    "QuantizationError",
    "InvalidConfigurationError",
    "ImpossiblePartitionError",
    "QuantizationCancelled",
    "RemapError",
    "QuantizationPipeline",
    "quantize_image",
]
