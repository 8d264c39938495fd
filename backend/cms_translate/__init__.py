"""Content translation caching service for the municipal website."""

__version__ = "0.1.0"
