"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from family_ledger.config import Settings, settings as default_settings
from family_ledger.db.store import LedgerStore
from family_ledger.routers import backup, budgets, categories, ledgers, members, records, reports
from family_ledger.services.category_service import CategoryCatalog
from family_ledger.utils.errors import AppError, InvalidInputError
from family_ledger.utils.result import to_app_error, validation_message

logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    store: LedgerStore | None = None,
    catalog: CategoryCatalog | None = None,
) -> FastAPI:
    """Build the HTTP application around one ledger store."""
    settings = settings or default_settings
    store = store or LedgerStore(settings.database_url, echo=settings.database_echo)
    catalog = catalog or CategoryCatalog(settings.categories_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open and close the store with the app lifecycle."""
        store.init()
        logger.info("Starting %s in %s", settings.app_name, settings.environment)
        yield
        store.close()

    app = FastAPI(
        title=settings.app_name,
        description="Family bookkeeping API",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.categories = catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timing_middleware(request: Request, call_next):
        """Add per-request processing time and optionally log slow requests."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"

        threshold_ms = settings.slow_request_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning(
                "Slow request %s %s %.1fms",
                request.method,
                request.url.path,
                elapsed_ms,
            )

        return response

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        """Convert domain exceptions into structured API responses."""
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        _: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Normalize FastAPI validation responses."""
        detail = exc.errors()
        message = detail[0].get("msg", "Invalid request") if detail else "Invalid request"
        api_error = InvalidInputError(message)
        return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())

    @app.exception_handler(ValidationError)
    async def model_validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
        """Report filters rejected while building query models."""
        api_error = InvalidInputError(validation_message(exc))
        return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Report database failures raised outside the query helper, such as on commit."""
        api_error = to_app_error(exc)
        return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        """Catch unexpected errors without leaking internals."""
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "code": "INTERNAL_ERROR"},
        )

    app.include_router(ledgers.router, prefix="/ledgers", tags=["ledgers"])
    app.include_router(members.router, prefix="/members", tags=["members"])
    app.include_router(records.router, prefix="/ledgers/{ledger_id}/records", tags=["records"])
    app.include_router(budgets.router, prefix="/ledgers/{ledger_id}/budgets", tags=["budgets"])
    app.include_router(reports.router, prefix="/ledgers/{ledger_id}/reports", tags=["reports"])
    app.include_router(categories.router, prefix="/categories", tags=["categories"])
    app.include_router(backup.router, prefix="/backup", tags=["backup"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint for uptime probes."""
        return {"status": "ok", "version": settings.app_version}

    return app


app = create_app()
