"""Allow running osm_render.cli as a module."""

import sys
from osm_render.cli import main

if __name__ == "__main__":
    sys.exit(main())
