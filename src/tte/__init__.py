# src/tte/__init__.py
"""TTE: a small terminal text editor with syntax highlighting and incremental search."""

__version__ = "0.1.0"
