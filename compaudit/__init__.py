"""Static audit pipeline for React component libraries."""

__version__ = "1.0.0"

__all__ = ["__version__"]
