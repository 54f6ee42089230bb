"""
Middleware for the Placemaker AI server.

- LogfireMiddleware: request timing, slow-request warnings and Logfire request events
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
