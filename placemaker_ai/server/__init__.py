"""
Placemaker AI Server Package.

This package contains the web server implementation for the Placemaker AI platform.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    auth: Caller identity and project permission checks.
    core: Server configuration and constants.
    services: Business logic shared by several routers.
    middleware: Request tracing.
    exception_handlers: Handlers for unhandled errors.
"""
