import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
import logfire

from booking_engine.config import settings
from booking_engine.database import init_db, close_db
from booking_engine.exceptions import BookingValidationError
from booking_engine.api import api_router

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Logfire - auto-instruments FastAPI
if settings.logfire_token:
    logfire.configure(
        token=settings.logfire_token,
        service_name="booking-engine",
        environment=settings.app_env,
        console=False,  # Disable console logging (too verbose)
    )
    logger.info("Logfire initialized")
else:
    logger.warning("Logfire token not set - observability disabled")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting %s...", settings.app_name)
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.app_name,
    description="Appointment validation and slot-allocation engine",
    version="1.0.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
if settings.logfire_token:
    logfire.instrument_fastapi(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookingValidationError)
async def booking_validation_error_handler(request: Request, exc: BookingValidationError):
    """Business rule rejections carry their machine-readable code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code.value},
    )


@app.exception_handler(OperationalError)
async def database_error_handler(request: Request, exc: OperationalError):
    """The store being unreachable is not a business verdict."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Database unavailable, please try again later"},
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": "1.0.0",
    }
