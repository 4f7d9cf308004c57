"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cloudspace.api import auth, files, workspaces
from cloudspace.config import get_settings
from cloudspace.exceptions import ErrorType, ServiceError
from cloudspace.schemas.error import ErrorResponse

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting Cloudspace API ({settings.environment})")
    yield


app = FastAPI(
    title="Cloudspace API",
    description="Multi-tenant workspace and file storage backed by an object store",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(error_type: ErrorType, message: str) -> JSONResponse:
    body = ErrorResponse(status=error_type.status, code=error_type.code, message=message)
    headers = {"WWW-Authenticate": "Bearer"} if error_type is ErrorType.UNAUTHORIZED else None
    return JSONResponse(status_code=error_type.status, content=body.model_dump(), headers=headers)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Map typed service errors to their status code and error body."""
    return error_response(exc.error_type, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report invalid request payloads as bad requests, one entry per field."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    return error_response(ErrorType.BAD_REQUEST, message)


# Register routers
app.include_router(auth.router)
app.include_router(workspaces.router)
app.include_router(files.router)


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
