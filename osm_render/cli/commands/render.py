"""
Render command - Draw the road/park/river network of an archive.

Supports:
- PNG: Pure Python rasterized image
- SVG: Layered vector document
"""

import sys
import argparse
from argparse import Namespace
from pathlib import Path

from ...archive.flat_archive import FlatArchive
from ...exceptions import OSMRenderError
from ...rendering import render, detect_output_format, DEFAULT_WIDTH


COMMAND_HELP = 'Render an archive to PNG or SVG'
COMMAND_DESCRIPTION = '''Render roads, parks and rivers of a flat archive.

The output format is chosen from the output file extension (.png or .svg).
The raster height follows the aspect of the map extent.

Examples:
  osmrender render berlin.flat berlin.svg
  osmrender render berlin.flat berlin.png --width 2000
'''


def positive_int(value: str) -> int:
    """argparse type for widths."""
    number = int(value)
    if number < 1:
        raise ValueError(value)
    return number


def setup_parser(subparsers):
    """Setup the render subcommand parser."""
    parser = subparsers.add_parser(
        'render',
        help=COMMAND_HELP,
        description=COMMAND_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', help='Input archive directory')
    parser.add_argument('output', help='Output file (.png or .svg)')
    parser.add_argument(
        '--width',
        type=positive_int,
        default=DEFAULT_WIDTH,
        help=f'Canvas width in pixels (default: {DEFAULT_WIDTH})'
    )
    parser.set_defaults(func=run)
    return parser


def run(args: Namespace) -> int:
    """Execute render command."""
    quiet = getattr(args, 'quiet', False)

    if not Path(args.input).exists():
        print(f"Error: Archive not found: {args.input}", file=sys.stderr)
        return 3

    try:
        # Fail on the extension before opening anything
        output_format = detect_output_format(args.output)
        with FlatArchive.open(args.input) as archive:
            if not quiet:
                print(f"Rendering {archive.way_count} ways to {output_format.upper()} "
                      f"(width {args.width})...")
            result = render(archive, args.output, args.width)
    except (OSMRenderError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not quiet:
        features = result['features']
        print(f"Rendered {features['total']} features "
              f"({features['road']} roads, {features['park']} parks, {features['river']} rivers)")
        print(f"Saved {result['width']}x{result['height']} {result['format'].upper()} "
              f"to {result['output_file']}")
    return 0
