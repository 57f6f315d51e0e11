"""Pack command - compile OSM XML into a flat archive."""
import sys
import time
from argparse import Namespace
from pathlib import Path

from ...archive.builder import ArchiveBuilder


def setup_parser(subparsers):
    """Setup the pack subcommand parser."""
    parser = subparsers.add_parser(
        'pack',
        help='Compile an OSM XML file into a flat archive',
        description='Compile an OSM XML file into a flat archive directory '
                    'readable by the render, info and extract commands.'
    )
    parser.add_argument('input', help='Input OSM XML file')
    parser.add_argument('output', help='Output archive directory')
    parser.set_defaults(func=run)
    return parser


def run(args: Namespace) -> int:
    """Execute the pack command."""
    quiet = getattr(args, 'quiet', False)
    input_path = Path(args.input)

    if not input_path.exists():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 3

    start_time = time.time()
    if not quiet:
        print(f"Parsing {input_path}...")

    try:
        builder = ArchiveBuilder.from_osm_file(input_path)
        output_path = builder.write(args.output)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not quiet:
        stats = builder.stats
        print(f"Packed {stats['nodes']} nodes, {stats['ways']} ways, {stats['tags']} tags "
              f"into {output_path} in {time.time() - start_time:.2f}s")
        if stats['dropped_refs']:
            print(f"Warning: dropped {stats['dropped_refs']} references to missing nodes",
                  file=sys.stderr)
    return 0
