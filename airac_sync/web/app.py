#!/usr/bin/env python3

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
import logging
from datetime import datetime, timezone
import time

from airac_sync import config
from airac_sync.storage.database_storage import AiracStorage
from airac_sync.sync.importer import AiracImporter
from airac_sync.web.api import airac

logger = logging.getLogger(__name__)


def create_app(importer: Optional[AiracImporter] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        importer: Importer to serve; when None one is opened on
                  config.get_safe_db_path() at startup
    """
    if importer is not None:
        airac.set_importer(importer)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for FastAPI app."""
        logger.info("Starting up AIRAC import service...")
        opened_here = False
        if airac.importer is None:
            db_path = config.get_safe_db_path()
            try:
                storage = AiracStorage(db_path, timeout=config.SQLITE_TIMEOUT)
            except Exception as e:
                logger.error(f"Failed to open database {db_path}: {e}")
                raise
            airac.set_importer(AiracImporter(storage))
            opened_here = True
            logger.info(f"Using database {db_path}")

        yield

        logger.info("Shutting down AIRAC import service...")
        if opened_here:
            airac.set_importer(None)

    app = FastAPI(
        title="AIRAC Import Service",
        description="Preview and apply AIRAC navigation data updates",
        version="1.0.0",
        lifespan=lifespan
    )

    # Add security headers middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in config.SECURITY_HEADERS.items():
            response.headers[header] = value
        return response

    # Add request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        client_ip = request.client.host if request.client else "unknown"
        logger.info(
            f"{request.method} {request.url.path} - "
            f"{response.status_code} - {process_time:.3f}s - {client_ip}"
        )
        return response

    # Force HTTPS in production
    if config.FORCE_HTTPS:
        app.add_middleware(HTTPSRedirectMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(airac.router, prefix="/api/airac", tags=["airac"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    return app


app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL), format=config.LOG_FORMAT)
    uvicorn.run(
        "airac_sync.web.app:app",
        host="0.0.0.0",
        port=8000,
        log_level=config.LOG_LEVEL.lower()
    )
