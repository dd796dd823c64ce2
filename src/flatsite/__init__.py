"""flatsite - a flat-file markdown content site."""

__version__ = "0.1.0"
