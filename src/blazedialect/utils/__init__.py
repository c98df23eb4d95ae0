"""
Utility helpers shared across blazedialect packages.
"""

from .logging import configure_logging, get_logger, time_call
from .naming import camel_to_snake, normalize_product_name

__all__ = [
    "camel_to_snake",
    "configure_logging",
    "get_logger",
    "normalize_product_name",
    "time_call",
]
