"""
Exception handlers for the Placemaker AI server.

``setup_exception_handlers`` registers them on the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
