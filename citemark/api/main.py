"""
FastAPI main application for Citemark API.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from citemark.api.v1 import render_endpoints as v1_render
from citemark.config import get_api_config
from citemark.utils.logger import step_logger

API_TITLE = get_api_config().get("title", "Citemark API")
API_VERSION = get_api_config().get("version", "1.0.0")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - setup and teardown."""
    step_logger.info("[API] Starting up Citemark API...")

    try:
        from citemark.api.v1.dependencies import get_sqlite_connection
        get_sqlite_connection()
        step_logger.info("[API] ✓ SQLite source store initialized")
    except Exception as e:
        step_logger.error(f"[API] ✗ SQLite source store failed: {e}")

    yield

    step_logger.info("[API] Shutting down Citemark API...")


# Create FastAPI application
app = FastAPI(
    title=API_TITLE,
    description="Citation parsing and chat message rendering API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    step_logger.warning(f"[API] Validation error: {exc.errors()}")

    # Convert errors to JSON-serializable format (handle bytes in input)
    def make_serializable(obj):
        if isinstance(obj, bytes):
            return obj.decode('utf-8', errors='replace')
        elif isinstance(obj, dict):
            return {k: make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [make_serializable(item) for item in obj]
        elif isinstance(obj, (str, int, float, bool)) or obj is None:
            return obj
        return str(obj)

    errors = make_serializable(exc.errors())

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "ValidationError",
            "message": "Invalid request parameters",
            "details": errors
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    step_logger.error(f"[API] Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
            "details": {"exception": str(exc)}
        }
    )


@app.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Check if the API is running",
    tags=["Health"]
)
async def health_check():
    return {
        "status": "healthy",
        "service": API_TITLE,
        "version": API_VERSION
    }


# Include v1 rendering router
app.include_router(
    v1_render.router,
    prefix="/api/v1",
    tags=["Rendering v1"]
)


if __name__ == "__main__":
    import uvicorn

    step_logger.info("Starting Citemark API server...")

    uvicorn.run(
        "citemark.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
