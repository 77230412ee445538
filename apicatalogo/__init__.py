"""API Catálogo: a small REST catalog of categories and products."""

__version__ = "0.1.0"
