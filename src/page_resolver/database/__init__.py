"""Data source access and relation loading."""

from .database_manager import DatabaseManager
from .relation_loader import load_relations

__all__ = ["DatabaseManager", "load_relations"]
