"""Run every view and combine into a single report.

Runs: compare, histogram, quantize, sweep.

Example:
    bitdepth-tool all ./out photo.jpg --bit-depth 4
    bitdepth-tool all ./out photo.jpg --bit-depth 4 --json
"""

from bitdepth_viz.core.types import Report, View, ViewInput

view = View(
    name='all',
    help='Run every view. Combine into a single report.',
)

SKIP = {'all'}


@view.run
def run(inp: ViewInput, report: Report, args) -> None:
    from bitdepth_viz.registry import all_views

    for name, v in sorted(all_views().items()):
        if name in SKIP:
            continue
        v.execute(inp, report, args)
