import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core.errors import (
    AuthenticationRequiredError,
    MissingRowIndexError,
    ProcurementError,
    UnknownCompanyError,
    WriteFailedError,
)
from .core.session import SessionContext
from .dependencies import close_backend, get_session
from .models.common import ErrorResponse, HealthResponse
from .routers import analysis, companies, master_data, mrp, operations, session

# Setup logging
logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    AuthenticationRequiredError: 401,
    UnknownCompanyError: 404,
    MissingRowIndexError: 409,
    WriteFailedError: 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.SERVICE_NAME} v{settings.API_VERSION}")
    yield
    await close_backend()


# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware for cross-origin requests from UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.exception_handler(ProcurementError)
async def procurement_error_handler(request: Request, exc: ProcurementError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        500,
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    body = ErrorResponse(error=exc.message, code=exc.code, details=exc.details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/api/health", response_model=HealthResponse)
async def health(credentials: SessionContext = Depends(get_session)) -> HealthResponse:
    """Health check endpoint for monitoring service availability.

    Reports "degraded" while no spreadsheet credential is active, since
    reads are then served from seed data.
    """
    return HealthResponse.for_mode(
        settings.SERVICE_NAME, live=credentials.snapshot() is not None, version=settings.API_VERSION
    )


# Include routers
app.include_router(session.router, prefix="/api")
app.include_router(companies.router, prefix="/api")
app.include_router(master_data.router, prefix="/api")
app.include_router(mrp.router, prefix="/api")
app.include_router(operations.router, prefix="/api")
app.include_router(analysis.router, prefix="/api")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Procurement Dashboard API!"}


if __name__ == "__main__":
    # Get port from environment (Cloud Foundry sets this)
    port = int(os.getenv("PORT", "8000"))
    host = "0.0.0.0"

    logger.info(f"Starting API server on {host}:{port}")

    import uvicorn

    uvicorn.run("procurement_dashboard.main:app", host=host, port=port, log_level="info")
