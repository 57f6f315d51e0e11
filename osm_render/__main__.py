"""Allow running osm_render as a module.

Usage:
    python -m osm_render --help
    python -m osm_render render map.flat map.svg
"""

import sys
from osm_render.cli import main

if __name__ == "__main__":
    sys.exit(main())
