"""Command-line interface for osmrender.

Usage:
    osmrender --help
    osmrender render map.flat map.png
    python -m osm_render.cli info map.flat
"""

import sys
from osm_render.cli.main import main as _main, create_parser

__all__ = ['main', 'create_parser']


def main() -> int:
    """Entry point for the osmrender console script.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        return _main() or 0
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"osmrender: fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
