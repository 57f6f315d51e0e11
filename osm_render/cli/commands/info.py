"""Info command - archive summary and classification counts."""
import json
import sys
from argparse import Namespace
from pathlib import Path

from ...archive.flat_archive import FlatArchive
from ...exceptions import OSMRenderError
from ...filters.way_classifier import classify_ways
from ...models.way_type import LAYER_ORDER


def setup_parser(subparsers):
    """Setup the info subcommand parser."""
    parser = subparsers.add_parser(
        'info',
        help='Quick archive information',
        description='Display record counts and how many ways classify as '
                    'roads, parks and rivers.'
    )
    parser.add_argument('input', help='Input archive directory')
    parser.add_argument(
        '--json',
        action='store_true',
        help='Output as JSON'
    )
    parser.set_defaults(func=run)
    return parser


def summarize(archive) -> dict:
    """Record counts plus classification counts per feature kind."""
    classified = {kind: 0 for kind in LAYER_ORDER}
    for way_type in classify_ways(archive):
        classified[way_type.kind] += 1
    classified['total'] = sum(classified.values())
    classified['rejected'] = archive.way_count - classified['total']
    return {
        'archive': str(archive.path),
        'records': archive.counts(),
        'classified': classified,
    }


def run(args: Namespace) -> int:
    """Execute the info command."""
    if not Path(args.input).exists():
        print(f"Error: Archive not found: {args.input}", file=sys.stderr)
        return 3

    try:
        with FlatArchive.open(args.input) as archive:
            summary = summarize(archive)
    except OSMRenderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(summary, indent=2))
        return 0

    records = summary['records']
    classified = summary['classified']
    print(f"Archive: {summary['archive']}")
    print(f"  Nodes:        {records['nodes']:,}")
    print(f"  Ways:         {records['ways']:,}")
    print(f"  Tags:         {records['tags']:,} unique")
    print(f"  String table: {records['stringtable_bytes']:,} bytes")
    print("Renderable ways:")
    for kind in LAYER_ORDER:
        print(f"  {kind.capitalize() + 's:':<13} {classified[kind]:,}")
    print(f"  {'Rejected:':<13} {classified['rejected']:,}")
    return 0
