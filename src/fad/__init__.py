"""fad: find the most recently active directories."""

from fad.version import __version__

__all__ = ["__version__"]
