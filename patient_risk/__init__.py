"""Patient risk assessment client."""

__version__ = "1.0.0"
