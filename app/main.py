"""FastAPI application entrypoint. No business logic; only wiring, startup seeding and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import router
from app.core.config import APP_VERSION, settings
from app.core.database import SessionLocal
from app.core.log import configure_logging
from app.schemas.auth import ValidationErrorResponse, ValidationFailure
from app.services.bootstrap import seed_defaults

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and seed roles/admin before the server accepts connections."""
    configure_logging(settings.LOG_LEVEL)
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            report = seed_defaults(db, settings)
        finally:
            db.close()
        logger.info(
            "Startup seeding: roles_created=%s admin_created=%s",
            [r.value for r in report.roles_created],
            report.admin_created,
        )
    yield


app = FastAPI(
    title="User Directory API",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


def _field_name(loc: tuple[int | str, ...]) -> str:
    """('body', 'password') -> 'password'; a missing body reports as 'body'."""
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one {field, reason} entry per rejected input."""
    failures = [
        ValidationFailure(field=_field_name(tuple(err.get("loc", ()))), reason=err.get("msg", "invalid"))
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationErrorResponse(detail=failures).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Store or programming failures end the request with 500; they are logged, never retried."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "User Directory API"}
