"""
FastAPI application exposing the configured storage provider
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..storage import StorageProvider, create_storage_provider

configure_logging(debug=settings.debug)
logger = get_logger(__name__)


def create_app(storage_provider: StorageProvider | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        storage_provider: Provider to serve; when None the configured one is
            built at startup, so a ConfigurationError stops the app before it
            accepts requests.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting uploadkit API...")
        provider = storage_provider or create_storage_provider()
        app.state.storage_provider = provider
        logger.info("Storage provider ready", provider=provider.name)

        yield

        logger.info("Shutting down uploadkit API...")

    app = FastAPI(
        title="uploadkit API",
        description="Upload and remove files on the configured storage backend",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        provider: StorageProvider = app.state.storage_provider
        return {"status": "healthy", "version": __version__, "provider": provider.name}

    from .endpoints import uploads

    app.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "uploadkit.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
