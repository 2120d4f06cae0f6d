"""Utility functions for the page resolver."""

from .config_loader import Config, ResolverConfig, mask_dsn
from .validation_utils import decode_flag, decode_int, decode_text

__all__ = [
    "Config",
    "ResolverConfig",
    "mask_dsn",
    "decode_flag",
    "decode_int",
    "decode_text",
]
