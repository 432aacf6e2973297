"""Rate-limited backend for marketing image generation."""

__version__ = "0.1.0"
