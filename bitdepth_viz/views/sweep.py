"""Quantize at every bit depth from the original down to 1 and tabulate.

For each depth reports the level count, the bucket width, how many
quantization levels the image actually uses, and how many histogram
buckets are occupied after quantization. Shows where banding sets in.

Writes no files.

Example:
    bitdepth-tool sweep ./out photo.jpg
"""

import numpy as np

from bitdepth_viz.core.quantizer import quantized_luminosity
from bitdepth_viz.core.types import Report, View, ViewInput

view = View(
    name='sweep',
    help='Tabulate levels used and occupied histogram buckets for every bit depth.',
)


@view.run
def run(inp: ViewInput, report: Report, args) -> None:
    rows = []
    for result in inp.session.sweep():
        snapped = quantized_luminosity(inp.original, result.bit_depth, inp.original_bit_depth)
        rows.append(
            {
                'bit_depth': result.bit_depth,
                'levels': result.levels,
                'step': result.step,
                'quantized_levels': int(np.unique(snapped).size),
                'nonzero': result.histogram.nonzero,
            }
        )
    report.add('sweep', {'depths': rows})
