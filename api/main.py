"""
FastAPI Backend for the Strategic Radar.

Serves scans, archived sessions, the consolidated intelligence base,
calendar links and CSV exports.
"""

import logging

from dotenv import load_dotenv

load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import radar
from radar import __version__
from radar.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    logger.info("Starting Strategic Radar API...")
    logger.info(f"History backend: {settings.radar.store_backend}, key: {settings.radar.history_key}")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Strategic Radar API",
    description="Scans, archives and consolidates strategic intelligence items",
    version=__version__,
    lifespan=lifespan,
)

# CORS - allow frontend to connect (configured via API_CORS_ORIGINS env var)
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

app.include_router(radar.router, prefix="/api/radar", tags=["radar"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__, "service": "Strategic Radar API"}
