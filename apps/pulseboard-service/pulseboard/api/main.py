"""
FastAPI app assembly: logging, middleware and router wiring.
"""
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from pulseboard import __version__
from pulseboard.api.auth import router as auth_router
from pulseboard.api.categories import router as categories_router
from pulseboard.api.dashboard import router as dashboard_router
from pulseboard.api.reports import router as reports_router
from pulseboard.api.tasks import router as tasks_router
from pulseboard.api.users import router as users_router
from pulseboard.utils.feature_flags import get_feature_flags

# Database schema is managed by Alembic migrations (SQLite builds it on first use).

app = FastAPI(
    title="Pulseboard Productivity Service",
    description="API for managing users, tasks and task categories, with dashboard metrics and reports.",
    version=__version__,
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

DEFAULT_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
]


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", "")
    configured = [o.strip() for o in raw.split(",") if o.strip()]
    return configured or DEFAULT_ORIGINS


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tasks_router)
app.include_router(categories_router)
app.include_router(dashboard_router)
app.include_router(reports_router)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "pulseboard", "version": __version__}


@app.get("/api/features")
def feature_flags():
    return get_feature_flags()
