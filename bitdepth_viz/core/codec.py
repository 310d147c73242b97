"""Image file decode/encode around PixelBuffer (Pillow)."""

import logging
import os

from PIL import Image, UnidentifiedImageError

from bitdepth_viz.core.types import InvalidInput, PixelBuffer

logger = logging.getLogger(__name__)


def load_image(path: str) -> PixelBuffer:
    """Decode an image file into an RGBA PixelBuffer.

    Raises:
        InvalidInput: the path is not a file or Pillow cannot decode it.
    """
    if not os.path.isfile(path):
        raise InvalidInput(f'image not found: {path}')
    try:
        with Image.open(path) as img:
            img.load()
            buffer = PixelBuffer.from_image(img)
    except UnidentifiedImageError as exc:
        raise InvalidInput(f'not a valid image file: {path}') from exc
    except OSError as exc:
        raise InvalidInput(f'could not read image {path}: {exc}') from exc
    logger.debug('loaded %s (%dx%d)', path, buffer.width, buffer.height)
    return buffer


def export_filename(bit_depth: int, prefix: str = 'processed') -> str:
    """File name a processed image is exported under, tagged with its depth."""
    return f'{prefix}-{bit_depth}bit.png'


def save_image(buffer: PixelBuffer, path: str) -> str:
    """Encode `buffer` as PNG at `path`, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    buffer.to_image().save(path, format='PNG')
    logger.debug('wrote %s', path)
    return path


def side_by_side(left: PixelBuffer, right: PixelBuffer, gap: int = 8) -> Image.Image:
    """Place two buffers next to each other on a transparent canvas."""
    width = left.width + gap + right.width
    height = max(left.height, right.height)
    canvas = Image.new('RGBA', (width, height), (0, 0, 0, 0))
    canvas.paste(left.to_image(), (0, 0))
    canvas.paste(right.to_image(), (left.width + gap, 0))
    return canvas
