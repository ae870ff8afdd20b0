"""FastAPI application factory and CLI entry point."""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from radiodial import __version__
from radiodial.api.exception_handlers import register_exception_handlers
from radiodial.api.routers import api_router
from radiodial.config import Settings, get_settings
from radiodial.infrastructure.lifecycle import lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app (services are wired in the lifespan)."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Internet radio playback with live now-playing metadata",
        lifespan=lifespan,
    )
    # The lifespan wires services from these, not from the cached global
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


def run() -> None:
    """Run the API server (the `radiodial` console script)."""
    settings = get_settings()
    uvicorn.run(
        "radiodial.main:app",
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
