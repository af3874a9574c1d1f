"""Step-by-step client intake wizard."""

__version__ = "1.0.0"
