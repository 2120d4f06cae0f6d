"""
Output formatting for resolved page ids.
"""

from .url_formatter import URLFormatter


__all__ = ["URLFormatter"]
