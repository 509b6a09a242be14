from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
import logging

from app.storage.dynamodb import DynamoDBService
from app.storage.s3 import S3Service
from app.settings import Settings, get_settings
from app.routers.image_service import router as image_router
from app.routers.health import router as health_router
from app.exceptions import add_exception_handlers, ConnectivityError

log = logging.getLogger("image-gallery")

def log_environment(settings: Settings):
    log.info("=== Environment Variables Check ===")
    for name, present in settings.env_report().items():
        log.info("%s: %s", name, "Set" if present else "Missing")

def run_diagnostics(settings: Settings, s3: S3Service, db: DynamoDBService):
    """
        Startup checks for both external dependencies.
        Failures are logged; the server keeps starting and surfaces them per request.
    """
    log.info("=== Testing S3 Connection ===")
    try:
        s3.list_buckets()
    except ConnectivityError as e:
        log.error("S3 connection check failed: %s", e.detail)

    log.info("=== Connecting to DynamoDB ===")
    try:
        db.connect(settings.dynamodb_uri)
    except ConnectivityError as e:
        log.error("DynamoDB connection failed: %s", e.detail)

def create_app(
    settings: Optional[Settings] = None,
    s3: Optional[S3Service] = None,
    db: Optional[DynamoDBService] = None,
) -> FastAPI:
    """
        Builds the FastAPI application. Clients passed in are used as-is
        (already connected); otherwise they are built from settings at startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
            Async context manager for FastAPI application lifecycle events.
            Initializes and closes resources (S3, DynamoDB) for the application.
        """
        app.state.settings = settings
        if s3 is not None and db is not None:
            app.state.s3 = s3
            app.state.db = db
        else:
            log_environment(settings)
            app.state.s3 = s3 or S3Service(settings)
            app.state.db = db or DynamoDBService(settings)
            run_diagnostics(settings, app.state.s3, app.state.db)

        log.info("=== Server Status ===")
        log.info("Health check: /api/health")
        log.info("Upload endpoint: /api/upload")
        log.info("Get images: /api/images")
        yield
        # Cleanup resources
        app.state.s3.close()
        app.state.db.close()

    app = FastAPI(
        title=settings.app_title,
        lifespan=lifespan,
        description="Image Gallery Service",
    )

    # Add exception handlers
    add_exception_handlers(app)

    # CORS - Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add the routers
    app.include_router(image_router)
    app.include_router(health_router)

    @app.get("/")
    def read_root():
        """
            Default end point
        """
        return f"{settings.app_title} is running."

    return app

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())

# Initialize App
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
