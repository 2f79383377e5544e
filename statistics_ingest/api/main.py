from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from statistics_ingest.api.routes import health, series
from statistics_ingest.auth import (
    Authenticator,
    AuthenticatorUnavailable,
    HttpAuthenticator,
    StaticAuthenticator,
)
from statistics_ingest.config.settings import settings
from statistics_ingest.db.init_db import init_database
from statistics_ingest.storage.repository import DataPointConflict, SeriesRepository
from statistics_ingest.utils.logger import logger


def default_authenticator() -> Authenticator:
    users = settings.static_users
    if users:
        logger.info(f"Using static authenticator with {len(users)} user(s)")
        return StaticAuthenticator(users)
    return HttpAuthenticator(settings.AUTHENTICATION_URL, settings.AUTHENTICATION_TIMEOUT)


async def bad_request(request: Request, exc: RequestValidationError):
    logger.warning(f"Bad request {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def conflict(request: Request, exc: DataPointConflict):
    logger.warning(f"Conflict {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=HTTPStatus.CONFLICT, content={"detail": str(exc)})


async def authenticator_unavailable(request: Request, exc: AuthenticatorUnavailable):
    return JSONResponse(
        status_code=HTTPStatus.SERVICE_UNAVAILABLE,
        content={"detail": "Authentication service unavailable"},
    )


def create_app(
    engine: Engine | None = None,
    authenticator: Authenticator | None = None,
) -> FastAPI:
    if engine is None:
        from statistics_ingest.db.connection import engine
    if authenticator is None:
        authenticator = default_authenticator()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        init_database(engine)
        yield

    app = FastAPI(
        title="Statistics Ingest",
        version="0.1.0",
        description="Authenticated ingestion of time series data points",
        lifespan=lifespan,
    )
    app.state.repository = SeriesRepository(engine)
    app.state.authenticator = authenticator

    app.add_exception_handler(RequestValidationError, bad_request)
    app.add_exception_handler(DataPointConflict, conflict)
    app.add_exception_handler(AuthenticatorUnavailable, authenticator_unavailable)

    app.include_router(health.router)
    app.include_router(series.router)
    return app
