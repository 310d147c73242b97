"""bitdepth-tool — Visualise bit-depth reduction and its luminosity histogram.

Usage: bitdepth-tool <view> <out_dir> <image> [options]

Views are auto-discovered from bitdepth_viz/views/.
Each view module's docstring is its documentation.
Run `bitdepth-tool help <view>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, bitdepth-tool looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import importlib
import logging
import sys

from bitdepth_viz import registry
from bitdepth_viz.core.codec import load_image
from bitdepth_viz.core.config import Settings, load_env
from bitdepth_viz.core.report import format_json, format_text
from bitdepth_viz.core.session import Session
from bitdepth_viz.core.types import BitDepthError, Report, ViewInput

logger = logging.getLogger('bitdepth_viz')


def _load_view_module(name: str) -> object:
    """Load the raw module for a view (for docstring access)."""
    return importlib.import_module(f'bitdepth_viz.views.{name}')


def _short_doc(name: str, fallback: str) -> str:
    doc = (_load_view_module(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else fallback


def _build_parser() -> argparse.ArgumentParser:
    views = registry.all_views()

    epilog = (
        'Examples:\n'
        '  bitdepth-tool quantize ./out photo.jpg --bit-depth 3\n'
        '  bitdepth-tool histogram ./out photo.jpg -b 2 --json\n'
        '  bitdepth-tool sweep ./out photo.jpg\n'
        '  bitdepth-tool all ./out photo.jpg -b 4\n'
        '  bitdepth-tool help quantize\n'
        '\n'
        'Env vars (set in .env or environment):\n'
        '  BITDEPTH_DEFAULT_DEPTH   bit depth when --bit-depth is omitted\n'
        '  BITDEPTH_ORIGINAL_DEPTH  original bit depth (default 8)\n'
        '  BITDEPTH_OUT_DIR         output dir when out_dir is "-"\n'
    )
    parser = argparse.ArgumentParser(
        prog='bitdepth-tool',
        description='Visualise bit-depth reduction: quantized image plus luminosity histogram.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging on stderr')
    sub = parser.add_subparsers(dest='view', help='View to run')

    # Auto-register each view as a subcommand using module docstring
    for name, v in sorted(views.items()):
        p = sub.add_parser(name, help=_short_doc(name, v.help))
        p.add_argument('out_dir', help='Directory for written images ("-" uses BITDEPTH_OUT_DIR)')
        p.add_argument('image', help='Path to source image (PNG, JPG, WEBP, ...)')
        p.add_argument(
            '-b',
            '--bit-depth',
            type=int,
            default=None,
            metavar='N',
            help='Luminosity bits, 1..original (default: BITDEPTH_DEFAULT_DEPTH or original)',
        )
        p.add_argument(
            '-o',
            '--original-bit-depth',
            type=int,
            default=None,
            metavar='N',
            help='Original bit depth, upper bound for --bit-depth (default: 8)',
        )
        p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')

    help_parser = sub.add_parser('help', help='Print full docs for a view')
    help_parser.add_argument('command', nargs='?', help='View name')

    return parser


def _print_help(command: str | None) -> None:
    """Print full module docstring for a view."""
    views = registry.all_views()

    if command is None:
        print('Available views:\n')
        for name, v in sorted(views.items()):
            print(f'  {name:<10} {_short_doc(name, v.help)}')
        print('\nRun: bitdepth-tool help <view> for full docs.')
        return

    if command not in views:
        print(f'Unknown view: {command}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(views))}', file=sys.stderr)
        sys.exit(1)

    doc = (_load_view_module(command).__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {command!r})')
        return
    print(doc)


def _run_view(args: argparse.Namespace, settings: Settings) -> Report:
    original_bit_depth = args.original_bit_depth
    if original_bit_depth is None:
        original_bit_depth = settings.original_bit_depth
    bit_depth = args.bit_depth
    if bit_depth is None:
        bit_depth = settings.default_bit_depth
    if bit_depth is None:
        bit_depth = original_bit_depth
    if args.out_dir == '-':
        args.out_dir = settings.out_dir or '.'

    original = load_image(args.image)
    session = Session(original, original_bit_depth=original_bit_depth)
    session.bit_depth = bit_depth

    report = Report(
        image_path=args.image,
        image_width=original.width,
        image_height=original.height,
        bit_depth=bit_depth,
        original_bit_depth=original_bit_depth,
    )
    registry.get(args.view).execute(ViewInput(path=args.image, session=session), report, args)
    return report


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s: %(message)s',
        stream=sys.stderr,
    )

    # Load .env before anything else; OS env vars always win
    env_path = load_env(env_file=args.env_file)
    if env_path:
        print(f'bitdepth-tool: loaded {env_path}', file=sys.stderr)

    if not args.view:
        parser.print_help()
        sys.exit(1)

    if args.view == 'help':
        _print_help(getattr(args, 'command', None))
        return

    try:
        settings = Settings.from_env()
        report = _run_view(args, settings)
    except BitDepthError as e:
        print(f'bitdepth-tool: {e}', file=sys.stderr)
        sys.exit(2)

    if args.json:
        print(format_json(report))
    else:
        print(format_text(report))
    logger.debug('done: %s', ', '.join(report.files) or 'no files written')


if __name__ == '__main__':
    main()
