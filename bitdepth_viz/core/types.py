"""Shared types for bitdepth-tool: PixelBuffer, Histogram, View, Report, errors."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from PIL import Image

if TYPE_CHECKING:
    from bitdepth_viz.core.session import Session

CHANNELS = 4
HISTOGRAM_BUCKETS = 256


class BitDepthError(Exception):
    """Base class for every error raised by bitdepth-tool."""


class InvalidParameter(BitDepthError, ValueError):
    """Caller contract violation: bad bit depth or buffer dimensions."""


class InvalidInput(BitDepthError, ValueError):
    """Source image is missing or cannot be decoded."""


@dataclass(frozen=True)
class PixelBuffer:
    """An RGBA image as a read-only (H, W, 4) uint8 array.

    The array is copied on construction and locked, so a buffer can be handed
    between stages without anyone mutating it behind the owner's back.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray):
            raise InvalidParameter(f'pixels must be a numpy array, got {type(arr).__name__}')
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise InvalidParameter(f'pixels must have shape (H, W, 4), got {arr.shape}')
        if arr.dtype != np.uint8:
            raise InvalidParameter(f'pixels must be uint8, got {arr.dtype}')
        if arr.shape[0] <= 0 or arr.shape[1] <= 0:
            raise InvalidParameter(f'buffer must have positive width and height, got {arr.shape[1]}x{arr.shape[0]}')
        locked = np.array(arr, dtype=np.uint8, copy=True)
        locked.flags.writeable = False
        object.__setattr__(self, 'pixels', locked)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> int:
        """Number of pixels (W x H)."""
        return self.width * self.height

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    @classmethod
    def from_bytes(cls, data: bytes, width: int, height: int) -> PixelBuffer:
        """Build a buffer from flat RGBA bytes (row-major, 4 bytes per pixel)."""
        if width <= 0 or height <= 0:
            raise InvalidParameter(f'buffer must have positive width and height, got {width}x{height}')
        expected = width * height * CHANNELS
        if len(data) != expected:
            raise InvalidParameter(f'expected {expected} bytes for {width}x{height} RGBA, got {len(data)}')
        arr = np.frombuffer(data, dtype=np.uint8).reshape((height, width, CHANNELS))
        return cls(arr)

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Build a buffer from a PIL image in any mode (converted to RGBA)."""
        return cls(np.asarray(image.convert('RGBA'), dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class Histogram:
    """Pixel counts per integer luminosity level (0 = black, 255 = white)."""

    counts: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.counts) != HISTOGRAM_BUCKETS:
            raise InvalidParameter(f'histogram must have {HISTOGRAM_BUCKETS} buckets, got {len(self.counts)}')

    def __len__(self) -> int:
        return len(self.counts)

    def __getitem__(self, level: int) -> int:
        return self.counts[level]

    def __iter__(self):
        return iter(self.counts)

    @property
    def total(self) -> int:
        return sum(self.counts)

    @property
    def peak(self) -> int:
        return max(self.counts)

    @property
    def nonzero(self) -> int:
        """Number of occupied buckets, i.e. distinct luminosity levels present."""
        return sum(1 for c in self.counts if c)

    def bar_heights(self, scale: float = 100.0) -> list[float]:
        """Bar heights relative to the peak bucket, never below 1.

        An all-zero histogram yields all-1 bars.
        """
        peak = self.peak
        if peak == 0:
            return [1.0] * HISTOGRAM_BUCKETS
        return [max(1.0, c / peak * scale) for c in self.counts]

    def to_list(self) -> list[int]:
        return list(self.counts)


@dataclass(frozen=True)
class QuantizeResult:
    """Output of one (original, bit depth) request."""

    buffer: PixelBuffer
    histogram: Histogram
    bit_depth: int

    @property
    def levels(self) -> int:
        return 2**self.bit_depth

    @property
    def step(self) -> float:
        return 256 / self.levels


@dataclass
class ViewInput:
    """An image loaded for a view, with the session holding its bit depth."""

    path: str
    session: Session

    @property
    def original(self) -> PixelBuffer:
        return self.session.original

    @property
    def bit_depth(self) -> int:
        return self.session.bit_depth

    @property
    def original_bit_depth(self) -> int:
        return self.session.original_bit_depth


class View:
    """A self-registering report view.

    Usage in a view module:

        view = View(name='histogram', help='Luminosity histogram')

        @view.run
        def run(inp, report, args):
            ...
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, inp: ViewInput, report: Report, args: Any) -> None:
        """Execute the view's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'View {self.name} has no run function')
        self._run_fn(inp, report, args)


@dataclass
class Report:
    """Accumulates results from views for text/JSON output."""

    image_path: str = ''
    image_width: int = 0
    image_height: int = 0
    bit_depth: int = 8
    original_bit_depth: int = 8
    views: dict[str, dict[str, Any]] = field(default_factory=dict)
    files: list[str] = field(default_factory=list)

    def add(self, view_name: str, data: dict[str, Any]) -> None:
        """Add (or replace) the results of a view."""
        self.views[view_name] = data

    def add_file(self, path: str) -> None:
        """Record an artefact written to disk."""
        if path not in self.files:
            self.files.append(path)

    @property
    def levels(self) -> int:
        return 2**self.bit_depth
