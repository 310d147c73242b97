"""One loaded image and the bit depth currently applied to it.

The original is fixed for the life of the session, so results are memoized
by bit depth alone. Changing the depth never mutates earlier results.
"""

import logging

from bitdepth_viz.core.codec import export_filename
from bitdepth_viz.core.histogram import process
from bitdepth_viz.core.quantizer import MAX_BIT_DEPTH, validate_bit_depth
from bitdepth_viz.core.types import PixelBuffer, QuantizeResult

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, original: PixelBuffer, original_bit_depth: int = MAX_BIT_DEPTH):
        validate_bit_depth(original_bit_depth, original_bit_depth)
        self.original = original
        self.original_bit_depth = original_bit_depth
        self._bit_depth = original_bit_depth
        self._cache: dict[int, QuantizeResult] = {}

    @property
    def bit_depth(self) -> int:
        return self._bit_depth

    @bit_depth.setter
    def bit_depth(self, value: int) -> None:
        validate_bit_depth(value, self.original_bit_depth)
        self._bit_depth = value

    def result(self, bit_depth: int | None = None) -> QuantizeResult:
        """Quantized buffer and histogram for `bit_depth` (default: current)."""
        depth = self._bit_depth if bit_depth is None else bit_depth
        # True == 1 would otherwise hit the cache entry for depth 1
        validate_bit_depth(depth, self.original_bit_depth)
        cached = self._cache.get(depth)
        if cached is not None:
            logger.debug('cache hit bit_depth=%d', depth)
            return cached
        res = process(self.original, depth, self.original_bit_depth)
        self._cache[depth] = res
        return res

    def sweep(self) -> list[QuantizeResult]:
        """Results for every depth from the original bit depth down to 1."""
        return [self.result(d) for d in range(self.original_bit_depth, 0, -1)]

    def reset(self) -> None:
        """Return to the original bit depth and drop cached results."""
        self._bit_depth = self.original_bit_depth
        self._cache.clear()

    @property
    def export_name(self) -> str:
        return export_filename(self._bit_depth)
