"""
FastAPI app assembly: logging, router wiring and the healthcheck.
"""
import logging
import os
from fastapi import FastAPI

import catalog
from catalog.api.games import router as games_router

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)

ENVIRONMENT = os.getenv("CATALOG_ENV", "development")
logger.info("app_startup: log_level=%s environment=%s", LOG_LEVEL_NAME, ENVIRONMENT)

# Database schema is created with Base.metadata.create_all; see catalog.db.database.

app = FastAPI(
    title="Game Catalog Service",
    description="API for creating, browsing, updating and deleting catalog games.",
    version=catalog.__version__,
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.include_router(games_router)


@app.get("/v1/healthcheck")
def healthcheck():
    return {
        "status": "available",
        "system_info": {
            "environment": ENVIRONMENT,
            "version": catalog.__version__,
        },
    }
