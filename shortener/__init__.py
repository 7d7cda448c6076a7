"""URL shortener with a base-51 token codec."""

__version__ = "1.0.0"
