"""Data models for the page resolver."""

from .data_structures import (
    AssociatedRow,
    DomainRow,
    OutputMode,
    PageRow,
    ResolveRequest,
    ResolveResult,
)

__all__ = [
    "AssociatedRow",
    "DomainRow",
    "OutputMode",
    "PageRow",
    "ResolveRequest",
    "ResolveResult",
]
