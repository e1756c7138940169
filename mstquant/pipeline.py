"""MST color quantization pipeline with cancellation and stage output."""
from pathlib import Path
from typing import Callable, Dict, Optional, Union
import logging
import time

import numpy as np

from mstquant.types import (
    Diagnostics,
    ImageArray,
    InvalidConfigurationError,
    QuantizationCancelled,
    QuantizationResult,
    QuantizeConfig,
)
from mstquant.raster_ingest import as_rgb_array, load_image, save_image
from mstquant.smoothing import gaussian_smooth
from mstquant.colors import extract_distinct_colors
from mstquant.mst import build_mst
from mstquant.clustering import cluster_colors, is_valid_palette_size
from mstquant.palette import synthesize_palette
from mstquant.remap import build_remap_table, remap_pixels
from mstquant.quality import compare_images

logger = logging.getLogger(__name__)


class QuantizationPipeline:
    """Reduce an image to K colors by cutting the MST of its distinct colors."""

    def __init__(
        self,
        config: Optional[QuantizeConfig] = None,
        cancel_check: Optional[Callable[[], bool]] = None
    ):
        """
        Initialize quantization pipeline.

        Args:
            config: Configuration (uses defaults if None)
            cancel_check: Called before every stage; a truthy return value
                aborts the run with QuantizationCancelled
        """
        self.config = config or QuantizeConfig()
        self.cancel_check = cancel_check

        if self.config.save_stages is not None:
            self.config.save_stages.mkdir(parents=True, exist_ok=True)

    def _enter_stage(self, stage: str) -> float:
        """Check for cancellation and return the stage start time."""
        if self.cancel_check is not None and self.cancel_check():
            logger.info(f"Cancelled before stage '{stage}'")
            raise QuantizationCancelled(stage)
        return time.perf_counter()

    def quantize(self, image: ImageArray) -> QuantizationResult:
        """
        Quantize an in-memory image.

        Args:
            image: (H, W, 3) uint8 image

        Returns:
            QuantizationResult with the new image, palette and diagnostics

        Raises:
            InvalidConfigurationError: If n_colors is not an integer in 1..D
            QuantizationCancelled: If the cancellation signal fires
        """
        n_colors = self.config.n_colors
        if not is_valid_palette_size(n_colors):
            raise InvalidConfigurationError(n_colors)
        n_colors = int(n_colors)

        image = as_rgb_array(image)
        start_time = time.perf_counter()
        diagnostics = Diagnostics()
        timings = diagnostics.timings

        if image.size == 0:
            logger.info("Empty image, nothing to quantize")
            return QuantizationResult(
                image=image.copy(),
                palette=np.zeros((0, 3), dtype=np.uint8),
                assignment=None,
                diagnostics=diagnostics
            )

        smoothed = None
        source = image
        if self.config.smooth:
            t0 = self._enter_stage('smooth')
            smoothed = gaussian_smooth(image, self.config.filter_size, self.config.sigma)
            source = smoothed
            timings['smooth'] = time.perf_counter() - t0

        t0 = self._enter_stage('extract')
        distinct = extract_distinct_colors(source)
        diagnostics.distinct_colors = len(distinct)
        timings['extract'] = time.perf_counter() - t0
        logger.info(f"Distinct colors: {len(distinct)}")

        if n_colors > len(distinct):
            raise InvalidConfigurationError(n_colors, len(distinct))

        t0 = self._enter_stage('mst')
        tree = build_mst(distinct.colors)
        diagnostics.mst_weight = tree.total_weight
        timings['mst'] = time.perf_counter() - t0
        logger.info(f"MST weight: {tree.total_weight:.4f}")

        t0 = self._enter_stage('cluster')
        assignment = cluster_colors(tree, n_colors)
        diagnostics.n_clusters = assignment.n_clusters
        timings['cluster'] = time.perf_counter() - t0

        t0 = self._enter_stage('palette')
        palette = synthesize_palette(distinct.colors, assignment)
        timings['palette'] = time.perf_counter() - t0

        t0 = self._enter_stage('remap')
        table = build_remap_table(distinct, assignment, palette)
        quantized = remap_pixels(source, table)
        timings['remap'] = time.perf_counter() - t0

        diagnostics.elapsed = time.perf_counter() - start_time
        logger.info(
            f"Quantized {image.shape[1]}x{image.shape[0]} image: "
            f"{len(distinct)} -> {len(palette)} colors in {diagnostics.elapsed:.3f}s"
        )

        return QuantizationResult(
            image=quantized,
            palette=palette,
            assignment=assignment,
            diagnostics=diagnostics,
            smoothed=smoothed
        )

    def process(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None
    ) -> QuantizationResult:
        """
        Quantize an image file.

        Args:
            input_path: Path to input image
            output_path: Optional path for the quantized image

        Returns:
            QuantizationResult
        """
        input_path = Path(input_path)
        image = load_image(input_path)
        logger.info(f"Loaded {input_path.name}: {image.shape[1]}x{image.shape[0]}")

        if self.config.save_stages is not None:
            self._save_stage_image(image, "stage_01_original.png")

        result = self.quantize(image)

        if self.config.save_stages is not None:
            if result.smoothed is not None:
                self._save_stage_image(result.smoothed, "stage_02_smoothed.png")
            self._save_stage_image(result.image, "stage_03_quantized.png")

        if output_path is not None:
            save_image(result.image, output_path)
            logger.info(f"Saved quantized image to {output_path}")

        return result

    def validate(self, result: QuantizationResult, original: ImageArray) -> Dict[str, Optional[float]]:
        """Compare a quantization result against the original image."""
        metrics = compare_images(as_rgb_array(original), result.image)
        metrics['palette_size'] = len(result.palette)
        return metrics

    def _save_stage_image(self, image: ImageArray, filename: str) -> None:
        """Save a debug stage image to the stages directory."""
        try:
            save_image(image, self.config.save_stages / filename)
        except Exception as e:
            logger.warning(f"Failed to save stage {filename}: {e}")


def quantize_image(image: ImageArray, n_colors: int, **kwargs) -> QuantizationResult:
    """
    Quantize an image to ``n_colors`` colors.

    Convenience function for one-off processing; extra keyword arguments
    are passed to QuantizeConfig.

    Example:
        >>> result = quantize_image(pixels, 16)
        >>> result = quantize_image(pixels, 8, smooth=True, sigma=1.5)
    """
    pipeline = QuantizationPipeline(QuantizeConfig(n_colors=n_colors, **kwargs))
    return pipeline.quantize(image)
