"""Luminosity histogram of the quantized image.

Quantizes to --bit-depth, then counts pixels per integer luminosity level
floor(0.299 R + 0.587 G + 0.114 B), 256 buckets from 0 (black) to 255
(white). Counts always sum to width x height.

Text output draws a bar chart scaled to the busiest bucket. JSON output
carries all 256 raw counts.

Example:
    bitdepth-tool histogram ./out photo.jpg --bit-depth 2 --json
"""

from bitdepth_viz.core.types import Report, View, ViewInput

view = View(
    name='histogram',
    help='256-bucket luminosity histogram of the quantized image.',
)


@view.run
def run(inp: ViewInput, report: Report, args) -> None:
    hist = inp.session.result().histogram
    report.add(
        'histogram',
        {
            'counts': hist.to_list(),
            'total': hist.total,
            'peak': hist.peak,
            'nonzero': hist.nonzero,
        },
    )
