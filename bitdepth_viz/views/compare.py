"""Original and quantized image side by side.

Writes <out_dir>/compare-<N>bit.png with the original on the left and the
quantized result on the right, separated by a transparent gap. Reports the
percentage of pixels whose RGB changed.

Example:
    bitdepth-tool compare ./out photo.jpg --bit-depth 1
"""

import os

import numpy as np

from bitdepth_viz.core.codec import export_filename, side_by_side
from bitdepth_viz.core.types import Report, View, ViewInput

view = View(
    name='compare',
    help='Save original and quantized side by side. Report share of changed pixels.',
)


@view.run
def run(inp: ViewInput, report: Report, args) -> None:
    result = inp.session.result()
    os.makedirs(args.out_dir, exist_ok=True)
    path = os.path.join(args.out_dir, export_filename(result.bit_depth, prefix='compare'))
    side_by_side(inp.original, result.buffer).save(path, format='PNG')
    report.add_file(path)

    changed = np.any(inp.original.rgb != result.buffer.rgb, axis=-1)
    changed_pct = round(float(changed.mean()) * 100, 1)
    report.add('compare', {'file': path, 'changed_pct': changed_pct})
