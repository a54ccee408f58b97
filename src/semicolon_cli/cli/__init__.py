"""
Command-line interface for semicolon-cli.
"""

from .app import app

__all__ = ["app"]
