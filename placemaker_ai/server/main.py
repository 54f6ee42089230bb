"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request timing), registers the exception handlers and includes all
API routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from placemaker_ai import __version__
from placemaker_ai.core.database import init_db
from placemaker_ai.core.logging_config import get_logger, setup_logging
from placemaker_ai.core.monitoring import initialize_logfire

from .api.v1 import (
    admin_users,
    analytics,
    councils,
    embed,
    enquiries,
    forms,
    health,
    mailing_list,
    map_data,
    pins,
    projects,
    queries,
    stakeholders,
    team,
    tours,
    webhooks,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing database tables on startup. A database that cannot be
    reached is logged and the server still starts, so health checks answer.
    """
    try:
        logger.info("Starting up Placemaker AI Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Placemaker AI Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Placemaker AI Server API

    Backend for community consultation on urban planning projects: stakeholder
    mapping with automatic detection of elected representatives, public map
    feedback, forms and enquiries, mailing lists and AI feedback analytics.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)
setup_exception_handlers(app)

PROJECTS_PREFIX = f"{constant.API_V1_STR}/projects"

app.include_router(health.router, tags=["health"])
app.include_router(projects.router, prefix=PROJECTS_PREFIX)
app.include_router(team.router, prefix=PROJECTS_PREFIX)
app.include_router(stakeholders.router, prefix=PROJECTS_PREFIX)
app.include_router(pins.router, prefix=PROJECTS_PREFIX)
app.include_router(forms.router, prefix=PROJECTS_PREFIX)
app.include_router(enquiries.router, prefix=PROJECTS_PREFIX)
app.include_router(mailing_list.router, prefix=PROJECTS_PREFIX)
app.include_router(map_data.router, prefix=PROJECTS_PREFIX)
app.include_router(tours.router, prefix=PROJECTS_PREFIX)
app.include_router(analytics.router, prefix=PROJECTS_PREFIX)
app.include_router(admin_users.router, prefix=f"{constant.API_V1_STR}/admin/users")
app.include_router(stakeholders.preview_router, prefix=f"{constant.API_V1_STR}/stakeholders")
app.include_router(councils.router, prefix=f"{constant.API_V1_STR}/councils")
app.include_router(forms.public_router, prefix=f"{constant.API_V1_STR}/forms")
app.include_router(queries.router, prefix=f"{constant.API_V1_STR}/queries")
app.include_router(webhooks.router, prefix=f"{constant.API_V1_STR}/webhooks")
app.include_router(embed.router, prefix=f"{constant.API_V1_STR}/embed")


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
