"""Pretty-printer for Apex syntax trees."""

__version__ = "0.1.0"
