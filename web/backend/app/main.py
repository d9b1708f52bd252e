"""FastAPI application for the toolindex registry.

Provides REST API endpoints wrapping the toolindex package for:
- Origin submission and verification
- Origin and ranked tool search
- Origin detail with trust breakdown
- Embeddable status badges
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolindex import __version__
from web.backend.app.routers import badge, registry

app = FastAPI(
    title="toolindex API",
    description=(
        "REST API for the tool manifest registry. "
        "Provides endpoints for origin submission, verification status, "
        "ranked tool discovery, and status badges."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins; the registry is read-mostly and public)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(registry.router)
app.include_router(badge.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "toolindex API",
        "version": __version__,
        "description": "Tool manifest registry REST API",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
