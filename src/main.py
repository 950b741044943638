"""
Portfol API - FastAPI Application Entry Point.

Portfolio and commercial proposal service for freelancers:
- Projects, proposals and portfolio settings per account
- Four interchangeable portfolio templates, PDF export and share links
- Streaming AI copywriting proxy

Run with:
    uvicorn src.main:app --reload --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.ai.gateway import AIGateway
from src.api import (
    ai_router,
    analytics_router,
    auth_router,
    portfolio_router,
    profile_router,
    projects_router,
    proposals_router,
    public_router,
)
from src.api.errors import portfol_error_handler
from src.core.config import get_settings
from src.core.database import DatabaseService
from src.core.exceptions import PortfolError
from src.repositories.session import SessionRegistry

VERSION = "1.0.0"


# ===========================================
# Logging Configuration
# ===========================================

def setup_logging():
    """Configure application logging."""
    settings = get_settings()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)
    logging.getLogger("weasyprint").setLevel(logging.WARNING)
    logging.getLogger("fontTools").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


# ===========================================
# Application Lifespan
# ===========================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    logger.info("=" * 50)
    logger.info("Portfol API Starting Up")
    logger.info("=" * 50)
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Free proposal limit: {settings.FREE_PROPOSAL_LIMIT}")
    logger.info(f"Public base URL: {settings.PUBLIC_BASE_URL}")

    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("Supabase credentials not configured!")

    if not settings.AI_GATEWAY_API_KEY:
        logger.warning("AI gateway API key not configured!")

    logger.info("Startup complete - ready to accept requests")

    yield

    # Shutdown
    app.state.sessions.close_all()
    logger.info("Portfol API shutting down...")


# ===========================================
# FastAPI Application
# ===========================================

def create_app(db: DatabaseService = None, ai_gateway: AIGateway = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Portfol API",
        description="""
        Portfolio and proposal builder for freelancers and creative professionals.

        ## Features

        - **Projects**: Case studies with four narrative stages, images and video
        - **Portfolio**: Case, gallery, slides and one-page templates, PDF export
        - **Proposals**: Budgets, free-plan quota, share links, client accept/reject
        - **AI Copywriting**: Streaming generation of bios and proposal sections

        ## Public

        - `GET /public/proposals/{token}/page` - Shared proposal
        - `GET /public/portfolios/{username}/page` - Public portfolio
        """,
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.state.db = db or DatabaseService()
    app.state.sessions = SessionRegistry(app.state.db, settings.FREE_PROPOSAL_LIMIT)
    app.state.ai_gateway = ai_gateway or AIGateway()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortfolError, portfol_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Include routers
    app.include_router(auth_router)
    app.include_router(projects_router)
    app.include_router(proposals_router)
    app.include_router(portfolio_router)
    app.include_router(profile_router)
    app.include_router(ai_router)
    app.include_router(public_router)
    app.include_router(analytics_router)

    app.add_api_route("/", root, methods=["GET"], tags=["root"])
    app.add_api_route("/health", health, methods=["GET"], tags=["root"])

    return app


# ===========================================
# Root Endpoints
# ===========================================

async def root():
    """Root endpoint with API information."""
    return JSONResponse({
        "service": "Portfol API",
        "version": VERSION,
        "status": "running",
        "endpoints": {
            "projects": "/projects",
            "proposals": "/proposals",
            "portfolio": {
                "settings": "GET|PATCH /portfolio/settings",
                "preview": "GET /portfolio/preview",
                "export": "GET /portfolio/export"
            },
            "profile": "/profile",
            "ai": "POST /ai/generate",
            "public": {
                "proposal": "GET /public/proposals/{token}/page",
                "portfolio": "GET /public/portfolios/{username}/page"
            },
            "docs": "GET /docs"
        }
    })


async def health(request: Request):
    """Liveness plus database connectivity."""
    database_ok = await request.app.state.db.health_check()
    return JSONResponse({
        "status": "healthy" if database_ok else "degraded",
        "version": VERSION,
        "database": "connected" if database_ok else "unavailable"
    })


# ===========================================
# Error Handlers
# ===========================================

async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if get_settings().DEBUG else "An error occurred"
        }
    )


# Create app instance
app = create_app()


# ===========================================
# Main Entry Point
# ===========================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
