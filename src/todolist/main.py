import locale
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_setup import setup_logging
from .settings import get_settings
from .routers import tasks as tasks_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "Create, edit, complete, search and delete to-do tasks.",
    },
]


# PUBLIC_INTERFACE
def apply_time_locale() -> bool:
    """
    Switch LC_TIME to the locale named by the environment (LC_ALL, LC_TIME, LANG)
    so formatted task dates follow the host settings. Returns False and keeps the
    current locale when the environment names one that is not installed.
    """
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as exc:
        logger.warning("Keeping %s time locale: %s", locale.setlocale(locale.LC_TIME), exc)
        return False
    return True


_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_file)
apply_time_locale()

app = FastAPI(
    title="To-Do List Backend",
    description="Backend API service for a to-do list with pluggable storage backends.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers for consistent JSON on validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(tasks_router.router)

logger.info("To-do API configured backend=%s", _settings.persistence_backend)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
