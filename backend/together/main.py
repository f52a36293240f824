"""
FastAPI entrypoint for the Together backend application.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from together.core.config import settings
from together.core.exceptions import InternalError, TogetherError
from together.core.utils import format_error
from together.api.router import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Together API",
    description="Backend API for the couples' shared finance ledger",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TogetherError)
async def together_error_handler(request: Request, exc: TogetherError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(format_error(exc.message, exc.details))
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters are validation failures (400)."""
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(format_error("Validation failed", exc.errors()))
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Store failures surface as InternalError without leaking driver details."""
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    error = InternalError("Internal server error")
    return JSONResponse(status_code=error.status_code, content=format_error(error.message))


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Together API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
