"""bitdepth_viz.core — Foundation layer.

Contains the pixel/histogram types, the quantizer, the histogram builder,
the image codec, sessions, config and the report builder.
This module has NO dependencies on bitdepth_viz.views or bitdepth_viz.registry.
Only stdlib, numpy, and PIL are allowed here.
"""

from bitdepth_viz.core.histogram import build_histogram, process
from bitdepth_viz.core.quantizer import quantize
from bitdepth_viz.core.types import (
    BitDepthError,
    Histogram,
    InvalidInput,
    InvalidParameter,
    PixelBuffer,
    QuantizeResult,
)

__all__ = [
    'BitDepthError',
    'Histogram',
    'InvalidInput',
    'InvalidParameter',
    'PixelBuffer',
    'QuantizeResult',
    'build_histogram',
    'process',
    'quantize',
]
