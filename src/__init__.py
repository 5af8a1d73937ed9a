"""sentencekit: example sentence retrieval and card enrichment."""

from sentencekit.version import __version__

__all__ = ["__version__"]
