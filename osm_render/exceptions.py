"""Exception hierarchy for osm_render."""


class OSMRenderError(Exception):
    """Base class for all osm_render errors."""


class ArchiveError(OSMRenderError):
    """Archive is missing, unreadable or malformed."""


class RenderError(OSMRenderError):
    """Rendering request cannot be fulfilled."""


class EmptyMapError(RenderError):
    """No way passed classification, so there is nothing to render."""


class DegenerateExtentError(RenderError):
    """Accepted features span zero width or zero height."""


class UnsupportedFormatError(RenderError):
    """Output path has no extension or an extension we cannot encode."""
