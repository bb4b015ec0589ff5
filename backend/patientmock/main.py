"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from patientmock import __version__
from patientmock.config import settings
from patientmock.database import Database
from patientmock.exceptions import register_exception_handlers
from patientmock.logging_config import setup_logging
from patientmock.middleware import setup_middleware
from patientmock.routes import accounts, admin, patients, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the embedded store on startup and close it on shutdown."""
    database = Database(settings.database_url, echo=settings.debug)
    await database.connect()
    app.state.database = database

    yield  # Application runs here

    await database.dispose()


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routers."""
    app = FastAPI(
        title="Patient Mock API",
        description="Mock patient management backend with several coexisting API versions",
        version=__version__,
        lifespan=lifespan,
    )

    setup_middleware(app)
    register_exception_handlers(app)

    app.include_router(admin.router)
    app.include_router(accounts.router)
    for router in patients.routers:
        app.include_router(router)
    app.include_router(users.router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    async def root() -> dict:
        """Root endpoint with API info."""
        return {
            "name": "Patient Mock API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


setup_logging(settings.log_level, settings.json_logs)
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    logger.info("Starting server on %s:%d", settings.host, settings.port)
    uvicorn.run("patientmock.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
