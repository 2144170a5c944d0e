"""Link preview resolution: URL classification, cached og:image lookup, preview rendering."""

from linkpreview.version import __version__

__all__ = ["__version__"]
