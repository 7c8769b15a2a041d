"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mdcanvas.api.config import get_settings
from mdcanvas.api.middleware import LoggingMiddleware
from mdcanvas.api.routes import api_router
from mdcanvas.dsl.schema import StructuralInputError

logger = logging.getLogger("mdcanvas.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Debug mode: {settings.debug}")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Markdown-to-canvas layout, pagination and editing service",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Logging middleware
    app.add_middleware(
        LoggingMiddleware,
        exclude_paths=["/health"],
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StructuralInputError)
    async def structural_input_error_handler(request: Request, exc: StructuralInputError) -> JSONResponse:
        logger.warning(f"Rejected content blocks on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder({"detail": str(exc), "errors": exc.errors}),
        )

    # Include API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mdcanvas.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
