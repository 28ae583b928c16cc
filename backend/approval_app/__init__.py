"""Social media content approval dashboard."""

__version__ = "0.1.0"
