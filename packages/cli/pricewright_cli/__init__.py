"""Command-line interface for pricewright."""

__version__ = "0.1.0"
