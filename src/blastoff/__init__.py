"""blastoff: estimate assembly accuracy from simulated mate pairs."""

from blastoff.__version__ import __version__, __author__, __description__

__all__ = ["__version__", "__author__", "__description__"]
