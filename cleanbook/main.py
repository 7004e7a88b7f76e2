import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models, models_invoice  # noqa: F401 - register tables
from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.bookings.router import admin_router as admin_bookings_router
from .domain.bookings.router import guest_router as guest_bookings_router
from .domain.bookings.router import router as bookings_router
from .domain.catalog.router import admin_router as admin_services_router
from .domain.catalog.router import router as services_router
from .domain.invoices.router import router as invoices_router
from .domain.quotes.router import admin_router as admin_quotes_router
from .domain.quotes.router import router as quotes_router
from .domain.reports.router import router as reports_router
from .domain.scheduling.router import admin_router as admin_calendar_router
from .domain.scheduling.router import router as calendar_router
from .exceptions import BookingEngineError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="CleanBook API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(BookingEngineError)
async def booking_engine_exception_handler(request: Request, exc: BookingEngineError):
    """Domain failures carry a stable kind next to the human message"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


# Framework errors (unknown routes, wrong methods) get the same envelope
HTTP_ERROR_KINDS = {
    400: "validation",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    kind = HTTP_ERROR_KINDS.get(exc.status_code, "internal" if exc.status_code >= 500 else "http_error")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": kind, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header; everything else is a 400
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "error": "unauthorized",
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header.",
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "validation", "detail": errors})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.0f}ms)")
    return response


# Log CORS configuration for debugging
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(services_router)
app.include_router(admin_services_router)
app.include_router(calendar_router)
app.include_router(admin_calendar_router)
app.include_router(bookings_router)
app.include_router(guest_bookings_router)
app.include_router(admin_bookings_router)
app.include_router(quotes_router)
app.include_router(admin_quotes_router)
app.include_router(invoices_router)
app.include_router(reports_router)


@app.get("/")
def root():
    return {"message": "CleanBook API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
