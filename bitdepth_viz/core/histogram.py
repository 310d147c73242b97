"""Luminosity histogram: 256 buckets of floor(0.299 R + 0.587 G + 0.114 B)."""

import logging

import numpy as np

from bitdepth_viz.core.quantizer import luminosity, quantize
from bitdepth_viz.core.types import HISTOGRAM_BUCKETS, Histogram, PixelBuffer, QuantizeResult

logger = logging.getLogger(__name__)


def build_histogram(buffer: PixelBuffer) -> Histogram:
    """Count pixels per integer luminosity level over the whole buffer.

    Counts always sum to width * height.
    """
    levels = np.floor(luminosity(buffer))
    levels = np.clip(levels, 0, HISTOGRAM_BUCKETS - 1).astype(np.intp)
    counts = np.bincount(levels.ravel(), minlength=HISTOGRAM_BUCKETS)[:HISTOGRAM_BUCKETS]
    hist = Histogram(tuple(int(c) for c in counts))
    logger.debug('histogram %d px, peak=%d, nonzero=%d', buffer.size, hist.peak, hist.nonzero)
    return hist


def process(original: PixelBuffer, bit_depth: int, original_bit_depth: int = 8) -> QuantizeResult:
    """Quantize `original` and build the histogram of the result."""
    quantized = quantize(original, bit_depth, original_bit_depth)
    return QuantizeResult(buffer=quantized, histogram=build_histogram(quantized), bit_depth=bit_depth)
