"""Resource store with tiered text lookup and a single-file bundle format."""

__version__ = "0.1.0"
