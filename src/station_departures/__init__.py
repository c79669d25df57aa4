"""Live departure boards with fuzzy station search."""

__version__ = "0.1.0"
