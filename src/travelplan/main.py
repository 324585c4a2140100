from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from travelplan.api.middleware.error_handler import (
    handle_generic_error,
    handle_integrity_error,
    handle_reconciliation_error,
    handle_validation_error,
)
from travelplan.api.middleware.logging import RequestLoggingMiddleware
from travelplan.api.v1 import router as v1_router
from travelplan.api.v1.health import router as health_router
from travelplan.config import settings
from travelplan.core.exceptions import ReconciliationError
from travelplan.core.logging_config import setup_logging
from travelplan.db.session import async_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await async_engine.dispose()


def create_app() -> FastAPI:
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Travel Planner Maintenance API",
        description="Data repair jobs for trip expenses",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Order matters - most specific first
    app.add_exception_handler(ReconciliationError, handle_reconciliation_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
