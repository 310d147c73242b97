"""Luminosity-preserving bit-depth reduction.

Each pixel's luminosity L = 0.299 R + 0.587 G + 0.114 B is snapped down to
the nearest multiple of step = 256 / 2**bit_depth, and the RGB channels are
scaled by Q / L so that hue is kept but brightness lands on the coarser
grid. Pixels with zero luminosity get a factor of 0 and stay black.

All arithmetic is float64 and strictly per pixel, so results match a scalar
evaluation of the same formula bit for bit.
"""

import logging

import numpy as np

from bitdepth_viz.core.types import InvalidParameter, PixelBuffer

logger = logging.getLogger(__name__)

MIN_BIT_DEPTH = 1
MAX_BIT_DEPTH = 8

LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


def validate_bit_depth(bit_depth: int, original_bit_depth: int = MAX_BIT_DEPTH) -> None:
    """Raise InvalidParameter unless 1 <= bit_depth <= original_bit_depth <= 8."""
    for name, value in (('original_bit_depth', original_bit_depth), ('bit_depth', bit_depth)):
        # bool is an int subclass; True is not a bit depth
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidParameter(f'{name} must be an integer, got {value!r}')
    if not MIN_BIT_DEPTH <= original_bit_depth <= MAX_BIT_DEPTH:
        raise InvalidParameter(
            f'original_bit_depth must be in [{MIN_BIT_DEPTH}, {MAX_BIT_DEPTH}], got {original_bit_depth}'
        )
    if not MIN_BIT_DEPTH <= bit_depth <= original_bit_depth:
        raise InvalidParameter(f'bit_depth must be in [{MIN_BIT_DEPTH}, {original_bit_depth}], got {bit_depth}')


def levels_for(bit_depth: int) -> int:
    return 2 ** int(bit_depth)


def step_for(bit_depth: int) -> float:
    """Width of one luminosity bucket at this depth."""
    return 256 / levels_for(bit_depth)


def luminosity(buffer: PixelBuffer) -> np.ndarray:
    """Per-pixel luminosity as an (H, W) float64 array."""
    rgb = buffer.rgb.astype(np.float64)
    return LUMA_R * rgb[:, :, 0] + LUMA_G * rgb[:, :, 1] + LUMA_B * rgb[:, :, 2]


def _snap(lum: np.ndarray, bit_depth: int) -> np.ndarray:
    step = step_for(bit_depth)
    return np.floor(lum / step) * step


def quantized_luminosity(buffer: PixelBuffer, bit_depth: int, original_bit_depth: int = MAX_BIT_DEPTH) -> np.ndarray:
    """Luminosity snapped down to the bucket grid for bit_depth, as (H, W) float64."""
    validate_bit_depth(bit_depth, original_bit_depth)
    return _snap(luminosity(buffer), bit_depth)


def quantize(original: PixelBuffer, bit_depth: int, original_bit_depth: int = MAX_BIT_DEPTH) -> PixelBuffer:
    """Reduce the luminosity resolution of `original` to 2**bit_depth levels.

    Returns a new buffer of the same dimensions; `original` is untouched and
    alpha is copied through unchanged.

    Raises:
        InvalidParameter: bit_depth outside [1, original_bit_depth], or
            original_bit_depth outside [1, 8].
    """
    validate_bit_depth(bit_depth, original_bit_depth)

    lum = luminosity(original)
    snapped = _snap(lum, bit_depth)

    # Exact zero guard: only L == 0 takes factor 0, no epsilon
    factor = np.zeros_like(lum)
    np.divide(snapped, lum, out=factor, where=lum > 0)

    scaled = original.rgb.astype(np.float64) * factor[:, :, np.newaxis]
    rgb = np.minimum(255.0, np.floor(scaled)).astype(np.uint8)

    out = np.empty_like(original.pixels)
    out[:, :, :3] = rgb
    out[:, :, 3] = original.alpha

    logger.debug(
        'quantize %dx%d bit_depth=%d levels=%d step=%g',
        original.width,
        original.height,
        bit_depth,
        levels_for(bit_depth),
        step_for(bit_depth),
    )
    return PixelBuffer(out)
