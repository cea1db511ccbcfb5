"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from lablens import __version__
from lablens.config import settings
from lablens.routes import analyze, refine

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Lab results must not be cached by intermediaries
        response.headers["Cache-Control"] = "no-store"
        return response


app = FastAPI(
    title="LabLens",
    description="Deterministic lab panel analysis - reference range classification and summaries",
    version=__version__,
    debug=settings.debug,
)

# Security headers middleware (applied to all responses)
app.add_middleware(SecurityHeadersMiddleware)

# CORS middleware for frontend
# Parse comma-separated origins from config
_cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["X-API-Key", "Content-Type"],
)

# Include API routers
app.include_router(analyze.router, prefix="/api")
app.include_router(refine.router, prefix="/api")

logger.info("LabLens API ready (refinement %s)", "enabled" if settings.refinement_enabled else "disabled")


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": "LabLens API",
        "version": __version__,
        "docs": "/docs",
    }
