import logging
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.api.auth import router as auth_router
from app.api.inquiries import router as inquiries_router
from app.api.vehicles import router as vehicles_router
from app.core.config import APP_VERSION, settings
from app.core.errors import (
    marketplace_error_handler,
    request_validation_error_handler,
    unhandled_error_handler,
)
from app.core.exceptions import MarketplaceError
from app.core.logging import setup_logging
from app.core.security import SECURITY_HEADERS
from app.db.session import create_engine, init_db
from app.services.seed import seed_users
from app.services.stores import build_stores

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database, build the stores and optionally seed users."""
    setup_logging()

    engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    await init_db(engine)
    app.state.engine = engine
    app.state.stores = build_stores(engine, settings)
    logger.info(f"{settings.APP_NAME} {APP_VERSION} started")

    if settings.SEED_USERS_ON_STARTUP:
        result = await seed_users(app.state.stores.credentials)
        logger.info(f"Seed users: {len(result.created)} created, {len(result.skipped)} skipped")

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_exception_handler(MarketplaceError, marketplace_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag the request with X-Request-ID (client supplied or generated) and bind it to log records."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.unbind_contextvars("request_id")

    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(SECURITY_HEADERS)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Retry-After"],
)


@app.get("/health")
async def health_check(request: Request):
    """200 while the database answers a trivial query, 503 otherwise."""
    database_ok = True
    try:
        async with request.app.state.stores.session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check could not reach the database: {e}")
        database_ok = False

    return JSONResponse(
        content={"status": "healthy" if database_ok else "unhealthy", "database": database_ok},
        status_code=200 if database_ok else 503,
    )


app.include_router(auth_router, prefix="/api")
app.include_router(vehicles_router, prefix="/api")
app.include_router(inquiries_router, prefix="/api")
