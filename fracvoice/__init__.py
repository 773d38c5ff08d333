"""Voice-driven stage tracking for hydraulic fracturing operations."""

__version__ = "0.1.0"
