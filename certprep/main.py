"""
Main FastAPI application.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from certprep.api.v1 import api_router
from certprep.core.config import settings
from certprep.core.exceptions import (
    CertPrepError,
    EmptyPool,
    InvalidConfig,
    InvalidQuestionData,
    PersistenceError,
    SessionCompleted,
    SessionExpired,
    SessionNotCompleted,
    SessionNotFound,
    UnknownQuestion,
)
from certprep.db.base import engine
from certprep.models import Base
from certprep.schemas.common import ErrorResponse
import logging

# Configure logging BEFORE creating the app
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(levelname)s:\t%(name)s\t%(message)s',
    handlers=[
        logging.StreamHandler()  # Output to console
    ]
)
logging.getLogger("uvicorn").setLevel(logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Timed IT certification practice tests with per-category progress tracking",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

cors_origins = settings.BACKEND_CORS_ORIGINS if settings.BACKEND_CORS_ORIGINS else ["*"]
if cors_origins == "*":
    cors_origins = ["*"]
logger.info(f"CORS enabled for origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_STATUS = {
    InvalidConfig: status.HTTP_400_BAD_REQUEST,
    UnknownQuestion: status.HTTP_400_BAD_REQUEST,
    InvalidQuestionData: status.HTTP_400_BAD_REQUEST,
    SessionNotFound: status.HTTP_404_NOT_FOUND,
    EmptyPool: status.HTTP_409_CONFLICT,
    SessionCompleted: status.HTTP_409_CONFLICT,
    SessionNotCompleted: status.HTTP_409_CONFLICT,
    SessionExpired: status.HTTP_410_GONE,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# Global exception handlers
@app.exception_handler(CertPrepError)
async def engine_exception_handler(request: Request, exc: CertPrepError):
    """
    Render engine errors with their error code.

    Args:
        request: Request object
        exc: Engine exception

    Returns:
        JSON response with detail, error_code and extra
    """
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    body = ErrorResponse(detail=exc.message, error_code=exc.error_code, extra=exc.extra)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON response with error details
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({"detail": exc.errors(), "body": exc.body}),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle all unhandled exceptions.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "message": str(exc)},
    )


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - Health check.

    Returns:
        Status message
    """
    return {
        "message": "CertPrep Practice Exams API",
        "status": "healthy",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy"}


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
