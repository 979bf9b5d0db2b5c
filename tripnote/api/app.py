"""FastAPI application for Tripnote.

Logging: Uses structured JSON logging.
Set LOG_FORMAT=pretty for development-friendly output.
"""

# Configure structured logging BEFORE importing anything else
from tripnote.utils.logging import configure_logging, get_logger, log

configure_logging()

MODULE = "api"
logger = get_logger()

from fastapi import FastAPI  # noqa: E402

from tripnote import __version__  # noqa: E402
from tripnote.api.routes.health import router as health_router  # noqa: E402
from tripnote.api.routes.plans import router as plans_router  # noqa: E402

app = FastAPI(
    title="Tripnote",
    description="Travel note to itinerary generation API",
    version=__version__,
)

app.include_router(health_router)
app.include_router(plans_router, prefix="/plans", tags=["plans"])

log.info(logger, MODULE, "app_ready", "API application created", version=__version__)
