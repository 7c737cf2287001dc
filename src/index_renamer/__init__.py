"""Rename index.* files after their directory and rewrite the imports that use them."""

__version__ = "0.1.0"
