import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookshelf.api.v1.router import api_router
from bookshelf.core.config import settings
from bookshelf.core.database import Base, SessionLocal, engine
from bookshelf.core.exceptions import LedgerError
from bookshelf.schemas.response import Messages, SuccessResponse, error_body


# Configure logging
def setup_logging():
    """Configure logging for the application"""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Set specific loggers to appropriate levels
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("fastapi").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


# Setup logging before creating the app
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(
        f"{settings.PROJECT_NAME} starting up "
        f"(merge policy: {settings.READING_SESSION_MERGE_POLICY})"
    )
    if settings.is_development:
        Base.metadata.create_all(bind=engine)
        logger.info("Development database tables ensured")

    yield

    # Shutdown
    logger.info(f"{settings.PROJECT_NAME} shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(
                str(part) for part in error.get("loc", ()) if part != "body"
            ),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(f"422 Validation Error on {request.method} {request.url}: {details}")

    return JSONResponse(
        status_code=422,
        content=error_body(
            Messages.VALIDATION_FAILED,
            message="Request validation failed",
            details=details,
        ),
    )


@app.exception_handler(LedgerError)
async def ledger_exception_handler(request: Request, exc: LedgerError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.status_code} {exc.error} on {request.method} {request.url}: "
        f"{exc.message}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, message=exc.message, details=exc.details),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"{exc.status_code} on {request.method} {request.url}: {exc.detail}")

    if isinstance(exc.detail, str):
        content = error_body(exc.detail)
    else:
        content = error_body("Request failed", details=[exc.detail])
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(OperationalError)
async def database_exception_handler(request: Request, exc: OperationalError):
    logger.error(f"Database unavailable on {request.method} {request.url}: {exc}")

    return JSONResponse(
        status_code=503,
        content=error_body(
            "Storage unavailable", message="The database is temporarily unavailable"
        ),
    )


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url}: {exc.orig}")

    return JSONResponse(
        status_code=409,
        content=error_body(
            "Conflicting data", message="The request conflicts with stored data"
        ),
    )


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring and load balancers"""
    timestamp = datetime.now(timezone.utc).isoformat()
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except OperationalError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content=error_body(
                "Service unhealthy",
                message=str(e),
                details=[{"database": "disconnected", "timestamp": timestamp}],
            ),
        )
    finally:
        db.close()

    return SuccessResponse(
        message="Service healthy",
        data={
            "status": "healthy",
            "timestamp": timestamp,
            "version": settings.VERSION,
            "database": "connected",
            "environment": settings.ENVIRONMENT,
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
