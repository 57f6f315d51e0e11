"""CLI command implementations."""

from osm_render.cli.commands import render, pack, info, extract

COMMANDS = (render, pack, info, extract)

__all__ = ['render', 'pack', 'info', 'extract', 'COMMANDS']
