"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xdefi import __version__
from xdefi.config import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="xdefi API",
        description="DEX aggregator quotes and DEX hook swap payloads",
        version=__version__,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from xdefi.api.routes import health
    from xdefi.web.controllers import quotes_router, swaps_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(quotes_router, prefix="/api/v1")
    app.include_router(swaps_router, prefix="/api/v1")

    return app
