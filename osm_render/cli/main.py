"""CLI main entry point with subcommand structure."""
import argparse
import logging
import sys
from typing import Optional

from osm_render import __version__
from osm_render.cli.commands import COMMANDS

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='osmrender',
        description='osmrender - Draw roads, parks and rivers from flat OSM archives',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  osmrender pack berlin.osm berlin.flat
  osmrender info berlin.flat
  osmrender render berlin.flat berlin.png --width 2000
  osmrender render berlin.flat berlin.svg
  osmrender extract berlin.flat network.geojson
'''
    )

    # Global options
    parser.add_argument('--version', '-V', action='version',
                        version=f'osmrender {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress non-error output')
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='Increase verbosity (-v info, -vv debug)')

    subparsers = parser.add_subparsers(dest='command', title='commands',
                                       description='Available commands')
    for command in COMMANDS:
        command.setup_parser(subparsers)

    return parser


def configure_logging(verbose: int = 0, quiet: bool = False) -> int:
    """Send library logging to stderr at a level chosen by -v/-q.

    Returns:
        The configured level
    """
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger('osm_render').setLevel(level)
    return level


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # No command specified - show help
    if not parsed_args.command:
        parser.print_help()
        return 0

    configure_logging(parsed_args.verbose, parsed_args.quiet)
    return parsed_args.func(parsed_args)


if __name__ == '__main__':
    sys.exit(main())
