"""Batch migration of episode audio objects to AAC."""

__version__ = "0.1.0"

__all__ = ["__version__"]
