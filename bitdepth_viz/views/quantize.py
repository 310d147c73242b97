"""Quantize the image to the requested bit depth and save it as a PNG.

Reduces luminosity resolution to 2**N levels (N = --bit-depth). Each pixel's
luminosity 0.299 R + 0.587 G + 0.114 B is snapped down to a multiple of
256 / 2**N, and R, G, B are scaled by the same factor so hue survives while
brightness bands. Alpha is copied unchanged. Pure black stays black.

Saves to <out_dir>/processed-<N>bit.png.

Example:
    bitdepth-tool quantize ./out photo.jpg --bit-depth 3
"""

import os

from bitdepth_viz.core.codec import save_image
from bitdepth_viz.core.types import Report, View, ViewInput

view = View(
    name='quantize',
    help='Reduce luminosity to 2^N levels and save processed-<N>bit.png.',
)


@view.run
def run(inp: ViewInput, report: Report, args) -> None:
    result = inp.session.result()
    path = save_image(result.buffer, os.path.join(args.out_dir, inp.session.export_name))
    report.add_file(path)
    report.add(
        'quantize',
        {
            'bit_depth': result.bit_depth,
            'levels': result.levels,
            'step': result.step,
            'file': path,
            'nonzero': result.histogram.nonzero,
            'peak': result.histogram.peak,
        },
    )
