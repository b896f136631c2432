from __future__ import annotations

import asyncio
import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from orderflow.core.errors import AppError
from orderflow.core.logging import company_id_var, configure_logging, correlation_id_var
from orderflow.core.settings import AppSettings, get_app_settings
from orderflow.db.config import Settings
from orderflow.db.run_migrations import main as run_alembic
from orderflow.db.seed import seed_all
from orderflow.db.session import Database
from orderflow.schemas.common import ErrorResponse, MessageResponse

# Routers
from orderflow.api.routes.auth import router as auth_router
from orderflow.api.routes.companies import router as companies_router
from orderflow.api.routes.customers import router as customers_router
from orderflow.api.routes.inventory import router as inventory_router
from orderflow.api.routes.orders import router as orders_router
from orderflow.api.routes.products import router as products_router
from orderflow.api.routes.reports import router as reports_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Auth", "description": "Signup, login and token endpoints."},
    {"name": "Companies", "description": "The caller's company settings."},
    {"name": "Products", "description": "Product catalog."},
    {"name": "Customers", "description": "Customers and their order history."},
    {"name": "Orders", "description": "Orders, lines, totals and status lifecycle."},
    {"name": "Inventory", "description": "Inventory rows and stock movements."},
    {"name": "Reports", "description": "Dashboard statistics."},
]


def _error(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    """Build the standard error envelope."""
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        parts.append(f"{'.'.join(loc) or 'body'}: {err.get('msg', 'invalid value')}")
    return "Invalid data: " + ", ".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic errors into a single readable message."""
    return _error(400, _format_validation_errors(exc))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return _error(400, "Database constraint violation", str(exc.orig))


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return _error(404, "Resource not found")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the standard envelope."""
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    response = _error(exc.status_code, detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler returning the error message in the standard envelope."""
    logger.exception("Unhandled error processing request")
    return _error(500, str(exc) or "Internal server error")


# PUBLIC_INTERFACE
def create_app(settings: Optional[AppSettings] = None, db_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters:
        settings: application settings; read from the environment when omitted
        db_settings: database settings; read from the environment when omitted
    Returns:
        FastAPI: the configured app. Its Database is available as app.state.db.
    """
    settings = settings or get_app_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.db = Database(db_settings)

    # CORS - avoid wildcard with credentials
    cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
        logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
        cors_allow_credentials = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=cors_allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """
        Assign a correlation id to the request for logging.
        Adds 'X-Correlation-ID' to every response.
        """
        corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
        token_corr = correlation_id_var.set(corr)
        token_company = company_id_var.set(None)
        request.state.correlation_id = corr

        logger.info("Incoming request %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token_corr)
            company_id_var.reset(token_company)
        response.headers["X-Correlation-ID"] = corr
        return response

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.on_event("startup")
    async def on_startup() -> None:
        """
        Run migrations and optional seeding on service startup.

        Seeding is opt-in via settings.
        """
        if settings.RUN_MIGRATIONS_ON_STARTUP:
            try:
                logger.info("Running Alembic migrations: upgrade head")
                # env.py drives its own event loop, so it runs off the server's loop.
                await asyncio.to_thread(run_alembic, ["upgrade", "head"])
                logger.info("Migrations completed.")
            except Exception as exc:
                logger.exception("Migration step failed: %s", exc)

        if settings.AUTO_SEED:
            try:
                logger.info("Running database seeding...")
                await seed_all(app.state.db)
                logger.info("Seeding completed.")
            except Exception as exc:
                logger.exception("Seeding step failed: %s", exc)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await app.state.db.dispose()

    app.include_router(build_api_router())
    return app


def build_api_router() -> APIRouter:
    """Assemble the /api/v1 router with every resource router."""
    api_v1 = APIRouter(prefix="/api/v1")

    # PUBLIC_INTERFACE
    @api_v1.get(
        "/health",
        response_model=MessageResponse,
        summary="Health Check",
        tags=["Health"],
    )
    def health_check() -> MessageResponse:
        """
        Basic liveness health check endpoint.

        Returns:
            MessageResponse: Simple confirmation that the service is running.
        """
        return MessageResponse(message="Healthy")

    for router in (
        auth_router,
        companies_router,
        products_router,
        customers_router,
        orders_router,
        inventory_router,
        reports_router,
    ):
        api_v1.include_router(router)
    return api_v1


app = create_app()
