# Main application entry point

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
import uvicorn

from gcs_drive.config.settings import get_settings
from gcs_drive.api.routes import router
from gcs_drive.common.logging_config import setup_logging
from gcs_drive.common.metrics import get_metrics, get_metrics_content_type
from gcs_drive.common.middleware import RequestTrackingMiddleware
from gcs_drive.storage.adapter import BackendError
from gcs_drive.storage.manager import get_drive_manager, reset_drive_manager

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and the drive registry for the app's lifetime."""
    setup_logging(settings.log_level, json_format=settings.log_json)
    manager = get_drive_manager()
    logger.info(f"Drives registered: {', '.join(manager.drivers)}; default disk: {settings.default_disk}")

    yield

    reset_drive_manager()


app = FastAPI(
    title="GCS Drive API",
    description="Google Cloud Storage drive exposed over HTTP",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(RequestTrackingMiddleware)
app.include_router(router)


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    logger.error(f"Backend error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


if __name__ == "__main__":
    uvicorn.run(
        "gcs_drive.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug
    )
