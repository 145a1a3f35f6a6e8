"""
Command-line interface for memwatch.
"""

from .main import main_cli

__all__ = ["main_cli"]
