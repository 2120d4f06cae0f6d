"""
CLI interface for the page resolver.
"""

from .main import main


__all__ = ["main"]
