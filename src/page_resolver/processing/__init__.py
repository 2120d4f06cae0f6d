"""
Resolution modules for the page resolver.

This package contains the hierarchy index, the argument query engine and the
selection combinator.
"""

from .associated_rows import AssociatedRowQueryEngine
from .hierarchy_index import HierarchyIndex, build_index
from .selection import combine_selection

__all__ = [
    "AssociatedRowQueryEngine",
    "HierarchyIndex",
    "build_index",
    "combine_selection",
]
