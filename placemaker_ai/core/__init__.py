"""
Core utilities for Placemaker AI.

This package provides logging configuration, monitoring, the database layer
and the shared domain and IO models.
"""

from placemaker_ai.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
