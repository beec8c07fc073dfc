"""
FastAPI application entry point for the Bitone API.

This module sets up the FastAPI application, includes routes,
and handles CORS, documentation, and middleware.
"""

import logging
import os
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

from bitone.api.config import API_VERSION, MAX_FILE_SIZE
from bitone.api.routes import dither

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("bitone.api")

# Create FastAPI app
app = FastAPI(
    title="Bitone API",
    description="API for dithering images to black and white",
    version=API_VERSION,
    docs_url=None,  # Disable default docs
    redoc_url=None,  # Disable default redoc
)

# Get CORS settings from environment variable or use default
cors_origins_str = os.environ.get("CORS_ORIGINS", "*")
cors_origins = cors_origins_str.split(",") if cors_origins_str != "*" else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Dither-Algorithm", "Content-Disposition"],
)

# Add routes
app.include_router(dither.router)


@app.get("/", tags=["health"])
async def root() -> Dict[str, Any]:
    """
    Root endpoint for health checks.

    Returns:
        Dictionary with API name, version, and status.
    """
    return {"name": "Bitone API", "version": API_VERSION, "status": "online"}


@app.get("/docs", include_in_schema=False)
async def custom_swagger_ui_html():
    """
    Custom Swagger UI endpoint.
    """
    return get_swagger_ui_html(
        openapi_url=app.openapi_url,
        title=f"{app.title} - API Documentation",
        swagger_js_url="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/swagger-ui-bundle.js",
        swagger_css_url="https://cdn.jsdelivr.net/npm/swagger-ui-dist@5/swagger-ui.css",
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to catch unhandled errors.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal server error occurred"},
    )


# Middleware to check content length
@app.middleware("http")
async def check_content_length(request: Request, call_next):
    """
    Middleware to check the content length of incoming requests.
    """
    content_length = request.headers.get("content-length")
    if (
        content_length
        and content_length.isdigit()
        and int(content_length) > MAX_FILE_SIZE
    ):
        logger.warning(f"Rejected request with content length {content_length}")
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={
                "detail": "Request content length exceeds the maximum allowed size"
            },
        )
    response = await call_next(request)
    return response


def start_api(host=None, port=None, reload=False):
    """
    Start the API using uvicorn.

    This function is the entry point when running the API.
    """
    import uvicorn

    host = host or os.environ.get("BITONE_API_HOST", "0.0.0.0")
    port = int(port or os.environ.get("BITONE_API_PORT", 8000))

    logger.info(f"Starting Bitone API on {host}:{port}")
    uvicorn.run(
        "bitone.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    start_api()
