"""Report builder: text and JSON output for bitdepth-tool results."""

import json
import os
from typing import Any

from bitdepth_viz.core.types import Histogram, Report

CHART_WIDTH = 40
CHART_ROWS = 32


def format_histogram_chart(counts: list[int], width: int = CHART_WIDTH, rows: int = CHART_ROWS) -> list[str]:
    """Render a histogram as horizontal bars scaled to the peak bucket.

    The 256 levels are folded into `rows` rows of equal width. A row's bar is
    its tallest bucket from Histogram.bar_heights, so an occupied row always
    shows at least one cell. Each row is labelled with its level range and
    pixel count.
    """
    hist = Histogram(tuple(counts))
    heights = hist.bar_heights(scale=width)
    per_row = len(hist) // rows
    lines = []
    for lo in range(0, len(hist), per_row):
        hi = lo + per_row - 1
        count = sum(hist.counts[lo : hi + 1])
        bar = '█' * (round(max(heights[lo : hi + 1])) if count else 0)
        lines.append(f'  {lo:>3}-{hi:<3} {bar:<{width}} {count}')
    return lines


def _format_view(name: str, data: dict[str, Any]) -> list[str]:
    lines = []
    if name == 'quantize':
        lines.append(f'  output: {data["file"]}')
        lines.append(f'  occupied levels: {data["nonzero"]}  peak: {data["peak"]}')
    elif name == 'histogram':
        lines.append(f'  pixels: {data["total"]}  peak: {data["peak"]}  occupied levels: {data["nonzero"]}')
        lines.extend(format_histogram_chart(data['counts']))
        lines.append('  0 = black, 255 = white')
    elif name == 'sweep':
        lines.append(f'  {"bits":>4} {"levels":>6} {"step":>6} {"used":>5} {"occupied":>8}')
        for row in data['depths']:
            lines.append(
                f'  {row["bit_depth"]:>4} {row["levels"]:>6} {row["step"]:>6g}'
                f' {row["quantized_levels"]:>5} {row["nonzero"]:>8}'
            )
    elif name == 'compare':
        lines.append(f'  side by side: {data["file"]}')
        lines.append(f'  changed pixels: {data["changed_pct"]:.1f}%')
    else:
        for k, v in data.items():
            lines.append(f'  {name}.{k}: {v}')
    return lines


def format_text(report: Report) -> str:
    """Format report as human-readable text."""
    dim = f'{report.image_width}×{report.image_height}'
    header = f'bitdepth-tool: {os.path.basename(report.image_path)} ({dim})'
    header += f' {report.bit_depth}-bit ({report.levels} levels) of {report.original_bit_depth}'
    lines = [header, '']

    for view_name, data in report.views.items():
        lines.append(f'── {view_name}')
        lines.extend(_format_view(view_name, data))
        lines.append('')

    if report.files:
        lines.append(f'wrote {len(report.files)} file(s)')
    return '\n'.join(lines)


def format_json(report: Report) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'image': report.image_path,
        'dimensions': {'width': report.image_width, 'height': report.image_height},
        'bit_depth': report.bit_depth,
        'levels': report.levels,
        'original_bit_depth': report.original_bit_depth,
        'views': report.views,
        'files': report.files,
    }
    return json.dumps(obj, indent=2)
