import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import settings
from .db import ensure_schema
from .errors import RecordValidationError, from_request_errors
from .limiter import limiter
from .routers import guides_api, homestays_api

# --- Logging configuration ---
_level = logging.DEBUG if getattr(settings, "DEBUG", False) else logging.INFO
logging.basicConfig(
    level=_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# Align uvicorn loggers with our level (useful under Docker Compose)
for _name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_name).setLevel(_level)
logger = logging.getLogger("localstay.startup")
logger.info("Starting %s (DEBUG=%s)", settings.APP_NAME, getattr(settings, "DEBUG", False))

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        f"{settings.APP_NAME}: local guides and homestays.\n\n"
        "JSON API under /api/v1 for creating, updating, filtering and searching listings."
    ),
    openapi_tags=[
        {"name": "guides", "description": "Local tour guide profiles."},
        {"name": "homestays", "description": "Bookable homestay listings."},
    ],
)

@app.on_event("startup")
def startup_event():
    """Runs startup tasks, like ensuring tables and indexes exist."""
    logger.info("Running startup tasks...")
    ensure_schema()
    logger.info("Startup tasks complete.")


@app.exception_handler(RecordValidationError)
async def record_validation_handler(request: Request, exc: RecordValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.to_list()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = from_request_errors(exc.errors())
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, error)
    return JSONResponse(status_code=422, content={"detail": error.to_list()})


# Add the limiter to the app state
app.state.limiter = limiter
# Add the exception handler for rate limit exceeded errors
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
# Applies the default limit to routes without their own @limiter.limit
app.add_middleware(SlowAPIMiddleware)

app.include_router(guides_api.router)
app.include_router(homestays_api.router)

# Locally stored uploads (when Cloudinary is not configured)
app.mount("/static/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

@app.get("/healthz")
@limiter.exempt
def healthz():
    return {"status": "ok"}
