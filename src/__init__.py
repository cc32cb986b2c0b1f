"""maktaba — fuzzy multilingual search and ranking for a document catalog."""

from maktaba.version import __version__

__all__ = ["__version__"]
