# Settings first so every module below sees the same environment.
from rolodex.config import get_settings

_settings = get_settings()

import logging  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from fastapi import Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from rolodex.constants import API_PREFIX  # noqa: E402
from rolodex.database import initialize_database  # noqa: E402
from rolodex.routers.contacts import router as contacts_router  # noqa: E402

# ---------------------------------------------------------------------------
# Logging – level from LOG_LEVEL, falls back to INFO for unknown names.
# ---------------------------------------------------------------------------

_log_level_name = _settings.log_level.upper()
try:
    _log_level = getattr(logging, _log_level_name)
except AttributeError:
    _log_level = logging.INFO
logging.basicConfig(level=_log_level, format="%(levelname)s - %(message)s", handlers=[logging.StreamHandler()])

logger = logging.getLogger(__name__)

app = FastAPI(title="Rolodex Contacts API", redirect_slashes=True)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

if _settings.auth_disabled:
    cors_origins = ["*"]
else:
    cors_origins = [o.strip() for o in _settings.allowed_cors_origins.split(",") if o.strip()]


@app.exception_handler(Exception)
async def ensure_cors_on_errors(request: Request, exc: Exception):
    """Turn unhandled exceptions into a JSON 500 that still carries CORS headers."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    origin = request.headers.get("origin", "*")
    if origin in cors_origins or "*" in cors_origins:
        allow_origin = origin
    else:
        allow_origin = cors_origins[0] if cors_origins else "*"

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": "*",
            "Access-Control-Allow-Headers": "*",
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(contacts_router, prefix=API_PREFIX)


@app.on_event("startup")
async def startup_event():
    """Create missing tables on app startup."""
    initialize_database()
    logger.info(f"Database tables initialized (environment={_settings.environment or 'default'})")


@app.get("/")
async def read_root():
    """Return a simple message to indicate the API is working."""
    return {"message": "Rolodex Contacts API is running"}
