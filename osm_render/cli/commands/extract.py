"""Extract command - export the classified network with geographic coordinates."""
import sys
from argparse import Namespace
from pathlib import Path

from ...archive.flat_archive import FlatArchive
from ...exceptions import OSMRenderError
from ...export import NetworkContext, get_exporter


def setup_parser(subparsers):
    """Setup the extract subcommand parser."""
    parser = subparsers.add_parser(
        'extract',
        help='Export roads, parks and rivers to GeoJSON or Shapefile',
        description='Export the classified network of an archive. The format '
                    'follows the output extension (.geojson, .json, .shp).'
    )
    parser.add_argument('input', help='Input archive directory')
    parser.add_argument('output', help='Output file')
    parser.set_defaults(func=run)
    return parser


def run(args: Namespace) -> int:
    """Execute the extract command."""
    quiet = getattr(args, 'quiet', False)

    if not Path(args.input).exists():
        print(f"Error: Archive not found: {args.input}", file=sys.stderr)
        return 3

    try:
        exporter = get_exporter(args.output)
        with FlatArchive.open(args.input) as archive:
            result = exporter.export(NetworkContext(archive), args.output)
    except (OSMRenderError, OSError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not quiet:
        features = result['metadata']['features']
        print(f"Exported {features['total']} features "
              f"({features['road']} roads, {features['park']} parks, {features['river']} rivers) "
              f"as {exporter.get_format_name()}")
    return 0
