"""Keyword co-occurrence networks and thematic maps for research corpora."""

__version__ = "0.1.0"
