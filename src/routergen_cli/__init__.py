"""routergen command-line interface."""

from routergen import __version__

__all__ = ["__version__"]
