import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import ALLOWED_ORIGINS, LOG_LEVEL, Settings
from .email_service import MailGateway
from .exceptions import (
    BookingValidationError,
    CalendarProviderError,
    MailProviderError,
)
from .routes import email_router, events_router
from .services.google_calendar_service import CalendarGateway

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")

    # Configuration errors are not recovered: the server must not start half-configured
    settings = Settings.from_env()
    app.state.settings = settings
    app.state.calendar_gateway = CalendarGateway.from_settings(settings)

    mail_gateway = MailGateway.from_settings(settings)
    if settings.smtp_verify_on_startup:
        mail_gateway.verify()
    else:
        logger.warning("Mail relay login check skipped (SMTP_VERIFY_ON_STARTUP=false)")
    app.state.mail_gateway = mail_gateway

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Event Booking API", version=__version__, lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON bodies are client errors in the same {"error": ...} shape as the rest"""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(BookingValidationError)
async def booking_validation_handler(request: Request, exc: BookingValidationError):
    logger.info(f"Rejected {request.url.path} ({exc.category}): {exc.reason}")
    return JSONResponse(status_code=400, content={"error": exc.reason})


@app.exception_handler(CalendarProviderError)
async def calendar_provider_handler(request: Request, exc: CalendarProviderError):
    # Provider internals stay in the server log
    logger.error(
        f"Event creation error [{exc.provider}]: {exc.message} "
        f"(code={exc.code}, details={exc.details})",
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Failed to create event"})


@app.exception_handler(MailProviderError)
async def mail_provider_handler(request: Request, exc: MailProviderError):
    logger.error(f"Email send error [{exc.provider}]: {exc.message} (code={exc.code})")
    return JSONResponse(
        status_code=500, content={"error": "Failed to send email", "details": exc.message}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# CORS Configuration - no cookies are used, so any origin may call the API
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(events_router)
app.include_router(email_router)


@app.get("/")
def root():
    return {"message": "Event Booking API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
