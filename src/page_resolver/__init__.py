"""
Page Resolver

Resolves page ids of a hierarchical pages table into fully-qualified site
URLs.
"""

__version__ = "1.0.0"
__author__ = "Page Resolver Team"

# Core exports
from .database import DatabaseManager
from .models import ResolveRequest, ResolveResult
from .orchestration import ResolverPipeline
from .processing import HierarchyIndex, build_index

__all__ = [
    "DatabaseManager",
    "HierarchyIndex",
    "ResolveRequest",
    "ResolveResult",
    "ResolverPipeline",
    "build_index",
    "__version__",
]
