"""
Orchestration module for the resolver pipeline.
"""

from .resolver_pipeline import ResolverPipeline


__all__ = ["ResolverPipeline"]
