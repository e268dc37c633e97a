"""A small document-oriented storage engine with checksummed block files."""

__version__ = "0.1.0"