"""
Top-level package for commitai.

This package exposes the main CLI entry point via the
``commitai.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "1.0.0"
